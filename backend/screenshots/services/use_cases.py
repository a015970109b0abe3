"""Domain use-case objects built on top of screenshot services."""

from __future__ import annotations

from typing import Iterable, List, Optional

from django.core.cache import cache
from django.core.exceptions import ValidationError as DjangoValidationError

from ..models import Group, Image
from ..tasks import group_images_cache_key
from .config import ScreenshotsConfig, get_config
from .errors import NotFoundError
from .storage import StorageGateway, build_storage_gateway
from .uploads import dispatch_post_upload_tasks, store_screenshots


class GroupUseCase:
    """Coordinate group-level operations."""

    def __init__(self, config: Optional[ScreenshotsConfig] = None, storage: Optional[StorageGateway] = None):
        self.config = config or get_config()
        self._storage = storage

    @property
    def storage(self) -> StorageGateway:
        if self._storage is None:
            self._storage = build_storage_gateway(self.config)
        return self._storage

    def groups(self):
        return Group.objects.all().order_by("-created_at")

    def get_group(self, group_id) -> Group:
        try:
            return Group.objects.get(id=group_id)
        except (Group.DoesNotExist, DjangoValidationError) as exc:
            raise NotFoundError("Group not found") from exc

    def create_group(self, serializer):
        serializer.save()

    def list_group_images(self, group: Group, category: Optional[str] = None):
        qs = group.images.all().order_by("-created_at")
        if category:
            qs = qs.filter(category=category)
        return qs

    def group_categories(self, group: Group) -> List[str]:
        return list(
            group.images.exclude(category__isnull=True)
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )

    def upload(self, group: Group, files: Iterable) -> List[Image]:
        try:
            images = store_screenshots(self.storage, group, files)
        finally:
            cache.delete(group_images_cache_key(group.id))
        if images and self.config.auto_categorize:
            dispatch_post_upload_tasks(group.id)
        return images
