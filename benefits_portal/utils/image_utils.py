import base64
import binascii
import io
import logging
import math
import re
from typing import Optional

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_WIDTH = 1200
MAX_HEIGHT = 600
QUALITY = 80

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")


def strip_data_url_prefix(base64_image: str) -> str:
    return _DATA_URL_PREFIX.sub("", base64_image or "", count=1)


def get_base64_image_size_kb(base64_image: str) -> int:
    """Approximate decoded size in KB of a base64 (or data URL) image."""
    data = strip_data_url_prefix(base64_image)
    size_in_bytes = math.ceil(len(data) * 3 / 4)
    return round(size_in_bytes / 1024)


def is_image_too_large(base64_image: str, max_size_kb: int = 5120) -> bool:
    return get_base64_image_size_kb(base64_image) > max_size_kb


def fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple:
    """Scales (width, height) down to fit the box, keeping aspect ratio. Never enlarges."""
    if width > max_width:
        height = round(height * max_width / width)
        width = max_width
    if height > max_height:
        width = round(width * max_height / height)
        height = max_height
    return max(width, 1), max(height, 1)


def resize_image_from_base64(
    base64_image: str,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
    quality: Optional[int] = None,
) -> str:
    """
    Resize and re-encode a base64 image as a JPEG data URL.
    The original string is returned unchanged when it cannot be decoded.
    """
    max_width = max_width or MAX_WIDTH
    max_height = max_height or MAX_HEIGHT
    quality = quality or QUALITY
    try:
        buffer = base64.b64decode(strip_data_url_prefix(base64_image), validate=False)
        with Image.open(io.BytesIO(buffer)) as image:
            size = fit_within(image.width, image.height, max_width, max_height)
            resized = image.convert("RGB")
            if size != (image.width, image.height):
                resized = resized.resize(size, Image.LANCZOS)
            output = io.BytesIO()
            resized.save(output, format="JPEG", quality=quality, optimize=True)
        encoded = base64.b64encode(output.getvalue()).decode("ascii")
        return f"data:image/jpeg;base64,{encoded}"
    except (binascii.Error, UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning(f"Image resize error: {e}")
        return base64_image
