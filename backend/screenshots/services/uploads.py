"""上传编排相关工具。"""

from __future__ import annotations

import logging
from typing import Iterable, List

from django.db import DatabaseError

from ..models import Group, Image
from ..tasks import categorize_group_task
from ..utils_uploads import build_object_key, ensure_image, validate_upload_meta
from .errors import PersistenceError, RequestValidationError
from .storage import StorageGateway

logger = logging.getLogger(__name__)


def dispatch_post_upload_tasks(group_id) -> None:
    """上传完成后调度分组的自动分类。"""

    categorize_group_task.delay(str(group_id))


def store_screenshots(storage: StorageGateway, group: Group, files: Iterable) -> List[Image]:
    """逐个写入存储并登记记录，遇到错误即中止。"""

    images: List[Image] = []
    for uploaded in files:
        content_type = getattr(uploaded, "content_type", None) or ""
        try:
            validate_upload_meta(content_type, uploaded.size)
            ensure_image(uploaded)
        except ValueError as exc:
            raise RequestValidationError(f"{uploaded.name}: {exc}") from exc

        file_path = build_object_key(group.id, uploaded.name)
        storage.upload(file_path, uploaded.read(), content_type)

        # 存储与记录不在同一事务内，插入失败时对象会留在存储中
        try:
            image = Image.objects.create(group=group, file_path=file_path, file_name=uploaded.name)
        except DatabaseError as exc:
            logger.error(
                "登记图片记录失败，存储对象已遗留",
                exc_info=True,
                extra={"group_id": str(group.id), "file_path": file_path},
            )
            raise PersistenceError(f"Failed to record image metadata: {exc}") from exc
        images.append(image)
    return images
