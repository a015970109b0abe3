from rest_framework import serializers

from .models import Group, Image


class GroupSerializer(serializers.ModelSerializer):
    image_count = serializers.IntegerField(source="images.count", read_only=True)

    class Meta:
        model = Group
        fields = ["id", "name", "description", "image_count", "created_at", "updated_at"]


class ImageSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = Image
        fields = ["id", "group", "file_path", "file_name", "category", "url", "created_at"]
        read_only_fields = ["id", "group", "file_path", "file_name", "category", "created_at"]

    def get_url(self, obj) -> str:
        storage = self.context.get("storage")
        if storage is None:
            return ""
        return storage.get_public_url(obj.file_path)


# ---------- 流水线入口的请求体 ----------

class CategorizeRequestSerializer(serializers.Serializer):
    groupId = serializers.UUIDField()


class ExportRequestSerializer(serializers.Serializer):
    groupId = serializers.UUIDField()
    groupName = serializers.CharField()
    figmaAccessToken = serializers.CharField(trim_whitespace=True)
