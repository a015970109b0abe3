"""运行配置：进程启动时从 Django settings 构建一次，显式传入各服务。"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from django.conf import settings

from .errors import StorageBackendNotConfigured


@dataclass(frozen=True)
class S3Config:
    bucket_name: str
    endpoint_url: Optional[str]
    region_name: Optional[str]
    access_key: Optional[str]
    secret_key: Optional[str]
    signature_version: str = "s3v4"


@dataclass(frozen=True)
class StorageConfig:
    backend: str
    bucket: str
    public_base_url: str = ""
    local_root: str = ""
    local_base_url: str = "/media/"
    s3: Optional[S3Config] = None


@dataclass(frozen=True)
class VisionConfig:
    api_key: Optional[str]
    api_base: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    max_tokens: int = 50
    timeout: float = 30.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class FigmaConfig:
    api_base: str = "https://api.figma.com/v1"
    web_base: str = "https://www.figma.com"
    timeout: float = 30.0


@dataclass(frozen=True)
class ScreenshotsConfig:
    storage: StorageConfig
    vision: VisionConfig
    figma: FigmaConfig = field(default_factory=FigmaConfig)
    categorize_workers: int = 1
    auto_categorize: bool = True


def _load_s3_config(bucket: str) -> S3Config:
    bucket_name = getattr(settings, "AWS_STORAGE_BUCKET_NAME", None) or bucket
    if not bucket_name:
        raise StorageBackendNotConfigured("AWS_STORAGE_BUCKET_NAME 未配置，无法使用 S3 存储")

    return S3Config(
        bucket_name=bucket_name,
        endpoint_url=getattr(settings, "AWS_S3_ENDPOINT_URL", None),
        region_name=getattr(settings, "AWS_S3_REGION_NAME", None),
        access_key=getattr(settings, "AWS_ACCESS_KEY_ID", None),
        secret_key=getattr(settings, "AWS_SECRET_ACCESS_KEY", None),
        signature_version=getattr(settings, "AWS_S3_SIGNATURE_VERSION", "s3v4"),
    )


def load_config() -> ScreenshotsConfig:
    """从 settings 读取全部配置项。"""

    backend = getattr(settings, "STORAGE_BACKEND", "local")
    if backend not in ("local", "s3"):
        raise StorageBackendNotConfigured(f"未知的存储后端: {backend}")
    bucket = getattr(settings, "SCREENSHOTS_BUCKET", "screenshots")

    storage = StorageConfig(
        backend=backend,
        bucket=bucket,
        public_base_url=getattr(settings, "SCREENSHOTS_PUBLIC_BASE_URL", ""),
        local_root=str(settings.MEDIA_ROOT),
        local_base_url=settings.MEDIA_URL,
        s3=_load_s3_config(bucket) if backend == "s3" else None,
    )
    vision = VisionConfig(
        api_key=getattr(settings, "OPENAI_API_KEY", None) or None,
        api_base=getattr(settings, "OPENAI_API_BASE", VisionConfig.api_base),
        model=getattr(settings, "OPENAI_MODEL", VisionConfig.model),
        max_tokens=getattr(settings, "OPENAI_MAX_TOKENS", VisionConfig.max_tokens),
        timeout=getattr(settings, "OPENAI_TIMEOUT", VisionConfig.timeout),
    )
    figma = FigmaConfig(
        api_base=getattr(settings, "FIGMA_API_BASE", FigmaConfig.api_base),
        web_base=getattr(settings, "FIGMA_WEB_BASE", FigmaConfig.web_base),
        timeout=getattr(settings, "FIGMA_TIMEOUT", FigmaConfig.timeout),
    )
    return ScreenshotsConfig(
        storage=storage,
        vision=vision,
        figma=figma,
        categorize_workers=max(1, int(getattr(settings, "SCREENSHOTS_CATEGORIZE_WORKERS", 1))),
        auto_categorize=bool(getattr(settings, "SCREENSHOTS_AUTO_CATEGORIZE", True)),
    )


_config: Optional[ScreenshotsConfig] = None
_config_lock = threading.Lock()


def get_config() -> ScreenshotsConfig:
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config
