"""聚合视图入口，便于路由导入。"""

from .base import GroupViewSet, ImageViewSet
from .functions import categorize_images, export_to_figma

__all__ = [
    "GroupViewSet",
    "ImageViewSet",
    "categorize_images",
    "export_to_figma",
]
