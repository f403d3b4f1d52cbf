"""
Task Manager API - Avatar Images

Uploaded pictures are checked, cropped to a square and re-encoded as PNG
before they are stored on the user document.
"""

import io
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from task_manager.errors import ValidationError

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}
AVATAR_MEDIA_TYPE = "image/png"


def validate_avatar_upload(filename: Optional[str], data: bytes, max_bytes: int) -> None:
    """Reject uploads with the wrong extension, no content or too many bytes."""
    if not filename or Path(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError("Please upload a jpg, jpeg or png image")
    if not data:
        raise ValidationError("Uploaded file is empty")
    if len(data) > max_bytes:
        raise ValidationError(f"File too large. Maximum size: {max_bytes} bytes")


def normalize_avatar(data: bytes, size: int) -> bytes:
    """Crop/resize to ``size`` x ``size`` and encode as PNG."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGBA")
            resized = ImageOps.fit(image, (size, size))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        raise ValidationError("Please upload a valid image")

    buffer = io.BytesIO()
    resized.save(buffer, format="PNG")
    return buffer.getvalue()
