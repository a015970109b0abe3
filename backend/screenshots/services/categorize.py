"""分类流水线：对分组内所有未分类图片逐张分类并写回。"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.db import connections

from .classifier import CategoryClassifier
from .config import ScreenshotsConfig, get_config
from .errors import PersistenceError
from .records import ImageRecords
from .storage import StorageGateway, build_storage_gateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorizeResult:
    """empty 表示没有需要处理的图片，completed 带成功/失败计数。"""

    status: str
    success: int = 0
    failed: int = 0

    @classmethod
    def empty(cls) -> "CategorizeResult":
        return cls(status="empty")

    @classmethod
    def completed(cls, success: int, failed: int) -> "CategorizeResult":
        return cls(status="completed", success=success, failed=failed)

    @property
    def is_empty(self) -> bool:
        return self.status == "empty"

    def to_dict(self) -> Dict[str, Any]:
        if self.is_empty:
            return {"message": "No uncategorized images found"}
        return {
            "message": "Categorization complete",
            "results": {"success": self.success, "failed": self.failed},
        }


class CategorizationPipeline:
    def __init__(
        self,
        config: ScreenshotsConfig,
        storage: Optional[StorageGateway] = None,
        classifier: Optional[CategoryClassifier] = None,
        records: Optional[ImageRecords] = None,
    ) -> None:
        self.config = config
        self.storage = storage or build_storage_gateway(config)
        self.classifier = classifier or CategoryClassifier(config.vision)
        self.records = records or ImageRecords()

    def _process(self, image) -> bool:
        try:
            image_url = self.storage.get_public_url(image.file_path)
            category = self.classifier.classify(image_url)
            self.records.set_category(image.id, category)
        except PersistenceError:
            logger.error("写入图片分类失败", exc_info=True, extra={"image_id": str(image.id)})
            return False
        except Exception:
            logger.exception("处理图片失败", extra={"image_id": str(image.id)})
            return False
        return True

    def _process_in_worker(self, image) -> bool:
        try:
            return self._process(image)
        finally:
            # 工作线程各自持有数据库连接，用完即关
            connections.close_all()

    def categorize(self, group_id) -> CategorizeResult:
        images = self.records.uncategorized(group_id)
        if not images:
            return CategorizeResult.empty()

        workers = min(self.config.categorize_workers, len(images))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = list(pool.map(self._process_in_worker, images))
        else:
            outcomes = [self._process(image) for image in images]

        success = sum(1 for ok in outcomes if ok)
        result = CategorizeResult.completed(success=success, failed=len(outcomes) - success)
        logger.info(
            "分组分类完成 success=%s failed=%s",
            result.success,
            result.failed,
            extra={"group_id": str(group_id)},
        )
        return result


def build_categorization_pipeline(config: Optional[ScreenshotsConfig] = None) -> CategorizationPipeline:
    return CategorizationPipeline(config or get_config())
