"""图片记录的读写封装，数据库异常统一转换为 PersistenceError。"""

from __future__ import annotations

from typing import List

from django.db import DatabaseError
from django.db.models import F

from ..models import Image
from ..taxonomy import is_valid_category
from .errors import PersistenceError


class ImageRecords:
    def uncategorized(self, group_id) -> List[Image]:
        try:
            return list(
                Image.objects.filter(group_id=group_id, category__isnull=True)
                .only("id", "file_path", "category")
                .order_by("created_at")
            )
        except DatabaseError as exc:
            raise PersistenceError(f"Failed to load uncategorized images: {exc}") from exc

    def set_category(self, image_id, category: str) -> None:
        if not is_valid_category(category):
            raise PersistenceError(f"Invalid category: {category!r}")
        try:
            updated = Image.objects.filter(id=image_id).update(category=category)
        except DatabaseError as exc:
            raise PersistenceError(f"Failed to update image {image_id}: {exc}") from exc
        if not updated:
            raise PersistenceError(f"Image {image_id} not found")

    def for_export(self, group_id) -> List[Image]:
        try:
            return list(
                Image.objects.filter(group_id=group_id)
                .only("id", "file_path", "file_name", "category")
                .order_by(F("category").asc(nulls_last=True), "created_at")
            )
        except DatabaseError as exc:
            raise PersistenceError(f"Failed to load group images: {exc}") from exc
