"""导出流水线：按分类整理分组内的图片，并在 Figma 中创建文件。"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..taxonomy import UNCATEGORIZED
from .config import ScreenshotsConfig, get_config
from .errors import NotFoundError, RequestValidationError
from .figma import FigmaClient
from .records import ImageRecords
from .storage import StorageGateway, build_storage_gateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportedImage:
    id: str
    name: str
    url: str


@dataclass(frozen=True)
class CategoryManifest:
    category: str
    images: List[ExportedImage] = field(default_factory=list)


@dataclass(frozen=True)
class ExportResult:
    file_key: str
    file_url: str
    categories: List[CategoryManifest]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": "Export to Figma completed",
            "figmaFileKey": self.file_key,
            "figmaUrl": self.file_url,
            "categories": [asdict(entry) for entry in self.categories],
        }


def group_images_by_category(images: Iterable) -> Dict[str, List]:
    """按分类分桶，未分类的图片归入 Uncategorized。"""

    grouped: Dict[str, List] = {}
    for image in images:
        grouped.setdefault(image.category or UNCATEGORIZED, []).append(image)
    return grouped


class ExportPipeline:
    def __init__(
        self,
        config: ScreenshotsConfig,
        storage: Optional[StorageGateway] = None,
        figma: Optional[FigmaClient] = None,
        records: Optional[ImageRecords] = None,
    ) -> None:
        self.config = config
        self.storage = storage or build_storage_gateway(config)
        self.figma = figma or FigmaClient(config.figma)
        self.records = records or ImageRecords()

    def build_manifest(self, images: Iterable) -> List[CategoryManifest]:
        return [
            CategoryManifest(
                category=category,
                images=[
                    ExportedImage(
                        id=str(image.id),
                        name=image.file_name,
                        url=self.storage.get_public_url(image.file_path),
                    )
                    for image in members
                ],
            )
            for category, members in group_images_by_category(images).items()
        ]

    def export_group(self, group_id, group_name: str, access_token: str) -> ExportResult:
        if not group_id or not group_name or not access_token:
            raise RequestValidationError("groupId, groupName, and figmaAccessToken are required")

        images = self.records.for_export(group_id)
        if not images:
            raise NotFoundError("No images found in this group")

        file_key = self.figma.create_file(access_token, group_name)
        # 清单不写入文件内容，随结果返回
        manifest = self.build_manifest(images)
        logger.info(
            "已创建 Figma 文件 %s，共 %s 个分类",
            file_key,
            len(manifest),
            extra={"group_id": str(group_id)},
        )
        return ExportResult(
            file_key=file_key,
            file_url=self.figma.file_url(file_key),
            categories=manifest,
        )


def build_export_pipeline(config: Optional[ScreenshotsConfig] = None) -> ExportPipeline:
    return ExportPipeline(config or get_config())
