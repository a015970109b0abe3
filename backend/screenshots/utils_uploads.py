import re
import uuid

from PIL import Image as PILImage, UnidentifiedImageError

SAFE_EXT_RE = re.compile(r"[^a-z0-9]+")

ALLOWED_CONTENT_TYPES = {
    "image/jpeg", "image/png", "image/webp", "image/gif"
}
MAX_SIZE_MB = 50


def file_extension(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1] if "." in filename else ""
    ext = SAFE_EXT_RE.sub("", ext.lower())
    return ext or "png"


def build_object_key(group_id, filename: str) -> str:
    """存储路径：<group_id>/<随机名>.<扩展名>"""
    return f"{group_id}/{uuid.uuid4().hex}.{file_extension(filename)}"


def validate_upload_meta(content_type: str, size: int):
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValueError("unsupported file type")
    if size > MAX_SIZE_MB * 1024 * 1024:
        raise ValueError(f"file too large, max {MAX_SIZE_MB}MB")


def ensure_image(file_obj):
    """确认上传内容能被 Pillow 识别为图片，读完后复位指针。"""
    try:
        with PILImage.open(file_obj) as img:
            img.verify()
    except PILImage.DecompressionBombError as exc:
        raise ValueError("image dimensions too large") from exc
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValueError("not a valid image") from exc
    finally:
        file_obj.seek(0)
