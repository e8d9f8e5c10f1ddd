import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO

from google.genai import types
from PIL import Image, UnidentifiedImageError

MAX_REFERENCE_BYTES = 5 * 1024 * 1024

_DATA_URL = re.compile(r"^data:(.+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class ReferenceImage:
    """Image sent inline alongside the prompt as a style reference."""

    data: bytes
    mime_type: str

    @classmethod
    def from_bytes(cls, data: bytes, max_bytes: int = MAX_REFERENCE_BYTES) -> "ReferenceImage":
        _check_size(data, max_bytes)
        try:
            with Image.open(BytesIO(data)) as img:
                fmt = img.format
        except UnidentifiedImageError as exc:
            raise ValueError("Reference file is not a recognised image") from exc
        mime_type = Image.MIME.get(fmt)
        if not mime_type:
            raise ValueError(f"Unsupported reference image format: {fmt}")
        return cls(data=data, mime_type=mime_type)

    @classmethod
    def from_data_url(cls, url: str, max_bytes: int = MAX_REFERENCE_BYTES) -> "ReferenceImage":
        """Decode a browser data URL; the MIME type comes from the bytes, not the URL."""
        match = _DATA_URL.match(url.strip())
        if not match:
            raise ValueError("Reference image must be a base64 data URL")
        _, payload = match.groups()
        try:
            data = base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError("Reference image payload is not valid base64") from exc
        return cls.from_bytes(data, max_bytes=max_bytes)

    def to_part(self) -> types.Part:
        return types.Part.from_bytes(data=self.data, mime_type=self.mime_type)


def _check_size(data: bytes, max_bytes: int) -> None:
    if not data:
        raise ValueError("Reference image is empty")
    if len(data) > max_bytes:
        raise ValueError(f"Image size must be less than {max_bytes // (1024 * 1024)}MB")
