"""存储网关：写入文件并推导公开访问地址。"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage

from .config import S3Config, ScreenshotsConfig, StorageConfig
from .errors import StorageBackendNotConfigured, StorageError


class StorageGateway(ABC):
    """存储网关接口：upload 为一次写入，get_public_url 为纯推导。"""

    @abstractmethod
    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        ...

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        ...


class S3StorageGateway(StorageGateway):
    """封装截图存储用到的 S3 操作。"""

    def __init__(self, config: S3Config, public_base_url: str = "") -> None:
        self.config = config
        self.public_base_url = public_base_url.rstrip("/")
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=self.config.endpoint_url,
                region_name=self.config.region_name,
                aws_access_key_id=self.config.access_key,
                aws_secret_access_key=self.config.secret_key,
                config=Config(signature_version=self.config.signature_version),
            )
        return self._client

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        params = {
            "Bucket": self.config.bucket_name,
            "Key": path,
            "Body": data,
        }
        if content_type:
            params["ContentType"] = content_type
        try:
            self.client.put_object(**params)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 upload failed: {exc}") from exc

    def get_public_url(self, path: str) -> str:
        key = quote(path.lstrip("/"))
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.config.endpoint_url:
            return f"{self.config.endpoint_url.rstrip('/')}/{self.config.bucket_name}/{key}"
        region = self.config.region_name or "us-east-1"
        return f"https://{self.config.bucket_name}.s3.{region}.amazonaws.com/{key}"


class LocalStorageGateway(StorageGateway):
    """本地文件系统存储，开发与测试环境使用。"""

    def __init__(self, config: StorageConfig) -> None:
        self.public_base_url = config.public_base_url.rstrip("/")
        base_url = config.local_base_url.rstrip("/") + f"/{config.bucket}/"
        self._storage = FileSystemStorage(
            location=os.path.join(config.local_root, config.bucket),
            base_url=base_url,
        )

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        # file_path 唯一，不允许覆盖或被存储层改名
        if self._storage.exists(path):
            raise StorageError(f"Object already exists: {path}")
        try:
            self._storage.save(path, ContentFile(data))
        except OSError as exc:
            raise StorageError(f"Local storage write failed: {exc}") from exc

    def get_public_url(self, path: str) -> str:
        url = self._storage.url(path)
        if self.public_base_url and url.startswith("/"):
            return f"{self.public_base_url}{url}"
        return url


def build_storage_gateway(config: ScreenshotsConfig) -> StorageGateway:
    storage = config.storage
    if storage.backend == "s3":
        if storage.s3 is None:
            raise StorageBackendNotConfigured("当前存储后端为 S3，但缺少 S3 配置")
        return S3StorageGateway(storage.s3, public_base_url=storage.public_base_url)
    if storage.backend == "local":
        return LocalStorageGateway(storage)
    raise StorageBackendNotConfigured(f"未知的存储后端: {storage.backend}")
