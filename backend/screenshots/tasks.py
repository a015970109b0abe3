"""截图分类相关的 Celery 任务。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from celery import shared_task
from django.core.cache import cache

from .services.categorize import build_categorization_pipeline
from .services.errors import ScreenshotsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskResult:
    """统一封装任务返回值，兼容字符串序列化。"""

    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if not self.detail:
            return self.status
        return f"{self.status}:{self.detail}"

    @classmethod
    def ok(cls, detail: Optional[str] = None) -> "TaskResult":
        return cls(status="ok", detail=detail)

    @classmethod
    def skip(cls, reason: str) -> "TaskResult":
        return cls(status="skip", detail=reason)

    @classmethod
    def error(cls, message: str) -> "TaskResult":
        return cls(status="err", detail=message)


def group_images_cache_key(group_id) -> str:
    return f"group_images_{group_id}"


@shared_task
def categorize_group_task(group_id: str) -> str:
    """对分组内未分类的截图执行自动分类。"""

    try:
        result = build_categorization_pipeline().categorize(group_id)
    except ScreenshotsError as exc:
        logger.exception("分组自动分类失败", extra={"group_id": group_id})
        return TaskResult.error(str(exc)).render()

    if result.is_empty:
        return TaskResult.skip("nothing_to_do").render()

    cache.delete(group_images_cache_key(group_id))
    return TaskResult.ok(f"success={result.success},failed={result.failed}").render()
