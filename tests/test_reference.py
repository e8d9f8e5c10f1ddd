"""
Tests for reference image decoding.
"""

import base64
from io import BytesIO

import pytest
from PIL import Image

from svg_app.reference import ReferenceImage


@pytest.fixture
def png_bytes() -> bytes:
    buf = BytesIO()
    Image.new("RGB", (8, 8), color=(139, 92, 246)).save(buf, format="PNG")
    return buf.getvalue()


class TestFromBytes:
    def test_detects_mime_type(self, png_bytes):
        ref = ReferenceImage.from_bytes(png_bytes)
        assert ref.mime_type == "image/png"
        assert ref.data == png_bytes

    def test_rejects_non_image(self):
        with pytest.raises(ValueError):
            ReferenceImage.from_bytes(b"definitely not an image")

    def test_rejects_oversized(self, png_bytes):
        with pytest.raises(ValueError, match="less than"):
            ReferenceImage.from_bytes(png_bytes, max_bytes=10)


class TestFromDataUrl:
    def test_parses_data_url(self, png_bytes):
        url = "data:image/png;base64," + base64.b64encode(png_bytes).decode()

        ref = ReferenceImage.from_data_url(url)

        assert ref.mime_type == "image/png"
        assert ref.data == png_bytes

    def test_rejects_non_image(self):
        with pytest.raises(ValueError, match="not a recognised image"):
            ReferenceImage.from_data_url("data:text/plain;base64,aGVsbG8gd29ybGQ=")

    def test_mime_type_comes_from_bytes(self, png_bytes):
        url = "data:image/jpeg;base64," + base64.b64encode(png_bytes).decode()

        assert ReferenceImage.from_data_url(url).mime_type == "image/png"

    def test_rejects_oversized(self, png_bytes):
        url = "data:image/png;base64," + base64.b64encode(png_bytes).decode()
        with pytest.raises(ValueError, match="less than"):
            ReferenceImage.from_data_url(url, max_bytes=10)

    @pytest.mark.parametrize(
        "url",
        ["https://example.com/cat.png", "data:image/png;base64,@@@not-base64@@@", "data:image/png;base64,"],
    )
    def test_rejects_bad_urls(self, url):
        with pytest.raises(ValueError):
            ReferenceImage.from_data_url(url)

    def test_to_part(self, png_bytes):
        part = ReferenceImage(data=png_bytes, mime_type="image/png").to_part()
        assert part.inline_data.mime_type == "image/png"
