"""服务端流水线入口：自动分类与导出到 Figma。"""

import logging

from django.core.cache import cache
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers import CategorizeRequestSerializer, ExportRequestSerializer
from ..services.categorize import build_categorization_pipeline
from ..services.errors import NotFoundError, RequestValidationError
from ..services.export import build_export_pipeline
from ..tasks import group_images_cache_key

logger = logging.getLogger(__name__)


def _invalid_request(message, serializer):
    return Response(
        {"error": message, "details": serializer.errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


@extend_schema(summary="对分组内未分类截图执行分类", request=CategorizeRequestSerializer, responses=OpenApiTypes.OBJECT)
@api_view(["POST"])
def categorize_images(request):
    """
    body: {groupId}
    """
    serializer = CategorizeRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid_request("groupId is required", serializer)
    group_id = serializer.validated_data["groupId"]

    try:
        result = build_categorization_pipeline().categorize(group_id)
    except Exception as exc:
        logger.exception("分类流水线执行失败", extra={"group_id": str(group_id)})
        return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not result.is_empty:
        cache.delete(group_images_cache_key(group_id))
    return Response(result.to_dict())


@extend_schema(summary="导出分组到 Figma", request=ExportRequestSerializer, responses=OpenApiTypes.OBJECT)
@api_view(["POST"])
def export_to_figma(request):
    """
    body: {groupId, groupName, figmaAccessToken}
    """
    serializer = ExportRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid_request("groupId, groupName, and figmaAccessToken are required", serializer)
    data = serializer.validated_data

    try:
        result = build_export_pipeline().export_group(
            data["groupId"], data["groupName"], data["figmaAccessToken"]
        )
    except RequestValidationError as exc:
        return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    except NotFoundError as exc:
        return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    except Exception as exc:
        logger.exception("导出到 Figma 失败", extra={"group_id": str(data["groupId"])})
        return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(result.to_dict())
