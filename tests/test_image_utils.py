import base64
import io
from unittest.mock import patch

from PIL import Image

from benefits_portal.utils.image_utils import (
    fit_within,
    get_base64_image_size_kb,
    is_image_too_large,
    resize_image_from_base64,
    strip_data_url_prefix,
)


def _png_data_url(width, height):
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height), (20, 120, 110, 255)).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def _decode(data_url):
    return Image.open(io.BytesIO(base64.b64decode(strip_data_url_prefix(data_url))))


def test_strip_data_url_prefix():
    assert strip_data_url_prefix("data:image/svg+xml;base64,AAAA") == "AAAA"
    assert strip_data_url_prefix("AAAA") == "AAAA"


def test_size_estimate_ignores_prefix():
    payload = "A" * 4096
    assert get_base64_image_size_kb(payload) == 3
    assert get_base64_image_size_kb("data:image/png;base64," + payload) == 3
    assert is_image_too_large(payload, max_size_kb=2)
    assert not is_image_too_large(payload, max_size_kb=3)


def test_fit_within_keeps_aspect_ratio():
    assert fit_within(2400, 600, 1200, 600) == (1200, 300)
    assert fit_within(600, 1800, 1200, 600) == (200, 600)
    assert fit_within(300, 200, 1200, 600) == (300, 200)


def test_resize_returns_jpeg_data_url():
    resized = resize_image_from_base64(_png_data_url(2400, 600))
    assert resized.startswith("data:image/jpeg;base64,")
    with _decode(resized) as image:
        assert image.format == "JPEG"
        assert image.size == (1200, 300)


def test_small_image_is_not_enlarged():
    resized = resize_image_from_base64(_png_data_url(100, 50), max_width=800, max_height=800, quality=60)
    with _decode(resized) as image:
        assert image.size == (100, 50)


def test_undecodable_image_is_returned_unchanged():
    assert resize_image_from_base64("data:image/png;base64,bm90IGFuIGltYWdl") == "data:image/png;base64,bm90IGFuIGltYWdl"


def test_decompression_bomb_is_returned_unchanged():
    data_url = _png_data_url(100, 50)
    with patch.object(Image, "MAX_IMAGE_PIXELS", 1000):
        assert resize_image_from_base64(data_url) == data_url
