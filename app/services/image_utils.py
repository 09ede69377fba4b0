import base64
from io import BytesIO

import pillow_heif
from PIL import Image, ImageOps

from app.schemas.assets import ImageRecord
from app.services.errors import IngestionFailed

pillow_heif.register_heif_opener()

# Pillow format -> media type the generation service takes.
# MPO is how Pillow reports multi-picture JPEGs from phone cameras.
SUPPORTED_FORMATS = {
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "HEIF": "image/heif",
}


def open_image(image_bytes: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except Exception as e:
        raise IngestionFailed(f"Cannot decode image: {e}")
    return img


def display_size(img: Image.Image) -> tuple:
    # phones store rotation in EXIF; report the size as it is displayed
    try:
        return ImageOps.exif_transpose(img).size
    except Exception:
        return img.size


def ingest_image(image_bytes: bytes, max_bytes: int) -> ImageRecord:
    if not image_bytes:
        raise IngestionFailed("Uploaded file is empty")
    if len(image_bytes) > max_bytes:
        raise IngestionFailed(f"Uploaded file is too large: {len(image_bytes)} bytes (limit {max_bytes})")

    img = open_image(image_bytes)
    mime = SUPPORTED_FORMATS.get(img.format or "")
    if not mime:
        raise IngestionFailed(f"Unsupported image format: {img.format} (use JPEG, PNG, WEBP or HEIC)")

    width, height = display_size(img)
    return ImageRecord(
        data=base64.b64encode(image_bytes).decode("utf-8"),
        mime_type=mime,
        width=width,
        height=height,
    )
