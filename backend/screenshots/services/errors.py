"""服务层异常定义，视图根据类型映射 HTTP 状态码。"""

from __future__ import annotations

from typing import Optional


class ScreenshotsError(Exception):
    """截图服务的基础异常。"""


class RequestValidationError(ScreenshotsError):
    """请求缺少必要字段或字段非法（400）。"""


class NotFoundError(ScreenshotsError):
    """找不到匹配的记录（404）。"""


class PersistenceError(ScreenshotsError):
    """数据库读写失败。"""


class StorageError(ScreenshotsError):
    """对象存储操作失败。"""


class StorageBackendNotConfigured(StorageError):
    """当目标存储后端不可用时抛出。"""


class ExternalServiceError(ScreenshotsError):
    """外部 HTTP 服务返回非成功响应。"""

    def __init__(self, service: str, detail: str, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.service = service
        self.detail = detail
        self.status_code = status_code
