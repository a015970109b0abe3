import uuid
from pathlib import Path

from django.db import models

from .taxonomy import category_choices


class Group(models.Model):
    """截图分组"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name


class Image(models.Model):
    class Meta:
        indexes = [
            models.Index(fields=["group", "category"], name="screenshots_group_category_idx"),
            models.Index(fields=["group", "created_at"], name="screenshots_group_created_idx"),
        ]

    # 一条记录对应存储中的一个对象
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="images")
    file_path = models.CharField(max_length=512, unique=True)
    file_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    # 仅由分类流水线写入，null 表示尚未分类
    category = models.CharField(
        max_length=32, choices=category_choices(), null=True, blank=True
    )

    def __str__(self):
        return self.file_name or Path(self.file_path).name
