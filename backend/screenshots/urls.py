from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    GroupViewSet,
    ImageViewSet,
    categorize_images,
    export_to_figma,
)

router = DefaultRouter()
router.register("groups", GroupViewSet, basename="group")
router.register("images", ImageViewSet, basename="image")

urlpatterns = router.urls + [
    path("functions/categorize-images/", categorize_images, name="categorize-images"),
    path("functions/export-to-figma/", export_to_figma, name="export-to-figma"),
]
