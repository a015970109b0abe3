"""Screenshot domain service layer.

This package contains reusable service helpers that encapsulate integrations
(object storage, the vision model, Figma) and the categorization/export
pipelines shared across views and tasks. Upload orchestration and use cases
are imported from ``uploads`` and ``use_cases`` directly.
"""

from .config import ScreenshotsConfig, get_config, load_config
from .errors import (
    ExternalServiceError,
    NotFoundError,
    PersistenceError,
    RequestValidationError,
    ScreenshotsError,
    StorageBackendNotConfigured,
    StorageError,
)
from .storage import StorageGateway, build_storage_gateway
from .classifier import CategoryClassifier, fallback_category
from .categorize import CategorizationPipeline, CategorizeResult, build_categorization_pipeline
from .export import ExportPipeline, ExportResult, build_export_pipeline

__all__ = [
    "ScreenshotsConfig",
    "get_config",
    "load_config",
    "ExternalServiceError",
    "NotFoundError",
    "PersistenceError",
    "RequestValidationError",
    "ScreenshotsError",
    "StorageBackendNotConfigured",
    "StorageError",
    "StorageGateway",
    "build_storage_gateway",
    "CategoryClassifier",
    "fallback_category",
    "CategorizationPipeline",
    "CategorizeResult",
    "build_categorization_pipeline",
    "ExportPipeline",
    "ExportResult",
    "build_export_pipeline",
]
