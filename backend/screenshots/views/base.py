import uuid

from core.settings import CACHE_TTL
from django.core.cache import cache
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from ..models import Image
from ..serializers import GroupSerializer, ImageSerializer
from ..services.errors import NotFoundError, RequestValidationError, ScreenshotsError
from ..services.use_cases import GroupUseCase
from ..tasks import group_images_cache_key


class GroupViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """截图分组管理"""
    serializer_class = GroupSerializer

    def get_use_case(self) -> GroupUseCase:
        if not hasattr(self, "_group_use_case"):
            self._group_use_case = GroupUseCase()
        return self._group_use_case

    def get_queryset(self):
        return self.get_use_case().groups()

    def perform_create(self, serializer):
        self.get_use_case().create_group(serializer)

    def _require_group(self, pk):
        try:
            return self.get_use_case().get_group(pk)
        except NotFoundError as exc:
            raise NotFound(str(exc)) from exc

    def _image_payload(self, images):
        context = {"request": self.request, "storage": self.get_use_case().storage}
        return ImageSerializer(images, many=True, context=context).data

    @extend_schema(
        summary="分组内的截图",
        parameters=[OpenApiParameter("category", str, description="按分类过滤")],
        responses=ImageSerializer(many=True),
    )
    @action(detail=True, methods=["get"])
    def images(self, request, pk=None):
        """获取分组内的截图，最新的在前"""
        group = self._require_group(pk)
        category = request.query_params.get("category")
        if category:
            images = self.get_use_case().list_group_images(group, category)
            return Response(self._image_payload(images))

        cache_key = group_images_cache_key(group.id)
        cached_data = cache.get(cache_key)
        if cached_data is not None:
            return Response(cached_data)
        data = self._image_payload(self.get_use_case().list_group_images(group))
        cache.set(cache_key, data, CACHE_TTL)
        return Response(data)

    @action(detail=True, methods=["get"])
    def categories(self, request, pk=None):
        """分组内已出现的分类"""
        group = self._require_group(pk)
        return Response({"categories": self.get_use_case().group_categories(group)})

    @extend_schema(summary="上传截图", request={"multipart/form-data": {"type": "object"}})
    @action(detail=True, methods=["post"], parser_classes=[MultiPartParser, FormParser])
    def upload(self, request, pk=None):
        """上传截图，完成后自动触发分类"""
        group = self._require_group(pk)
        files = request.FILES.getlist("images")
        if not files:
            return Response({"error": "No files selected"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            images = self.get_use_case().upload(group, files)
        except RequestValidationError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except ScreenshotsError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(self._image_payload(images), status=status.HTTP_201_CREATED)


class ImageViewSet(viewsets.ReadOnlyModelViewSet):
    """截图只读查询"""
    serializer_class = ImageSerializer
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["file_name"]
    ordering_fields = ["created_at", "category", "file_name"]

    def get_queryset(self):
        qs = Image.objects.all().order_by("-created_at")
        group_id = self.request.query_params.get("group")
        if group_id:
            try:
                uuid.UUID(group_id)
            except ValueError:
                raise ValidationError({"group": "Invalid group id"})
            qs = qs.filter(group_id=group_id)
        category = self.request.query_params.get("category")
        if category:
            qs = qs.filter(category=category)
        return qs

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if not hasattr(self, "_use_case"):
            self._use_case = GroupUseCase()
        context["storage"] = self._use_case.storage
        return context
