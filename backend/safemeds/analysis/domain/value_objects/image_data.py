"""
Image Data Value Object

Represents a photograph of drug packaging passed through the pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import base64
import binascii
import re

from ..exceptions import InvalidImageError


# Client cameras hand over data URLs; the prefix must never reach the model.
DATA_URL_PATTERN = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,", re.IGNORECASE)

DEFAULT_MIME_TYPE = "image/jpeg"

FORMAT_TO_MIME = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "bmp": "image/bmp",
}


@dataclass(frozen=True)
class ImageData:
    """
    Immutable value object holding decoded image bytes.

    Attributes:
        source: Original source identifier (file path, "base64", "upload")
        format: Image format (e.g., "jpeg", "png") if known
        _bytes: Raw image bytes (internal)
    """

    source: Optional[str] = None
    format: Optional[str] = None
    _bytes: bytes = field(default=b"", repr=False)

    def __post_init__(self) -> None:
        if not self._bytes:
            raise InvalidImageError("Image data cannot be empty")

    @property
    def bytes(self) -> bytes:
        """Raw image bytes."""
        return self._bytes

    @property
    def base64_string(self) -> str:
        """Base64 encoded image without any data-URL prefix."""
        return base64.b64encode(self._bytes).decode("utf-8")

    @property
    def mime_type(self) -> str:
        """MIME type sent along with the inline image bytes."""
        if self.format:
            return FORMAT_TO_MIME.get(self.format.lower(), DEFAULT_MIME_TYPE)
        return DEFAULT_MIME_TYPE

    def with_format(self, format: str) -> "ImageData":
        """Return a copy with a (detected) image format."""
        return ImageData(source=self.source, format=format.lower(), _bytes=self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __str__(self) -> str:
        return f"ImageData({len(self._bytes)} bytes, {self.format or 'unknown format'})"

    @classmethod
    def from_bytes(cls, data: bytes, format: Optional[str] = None) -> "ImageData":
        """Create ImageData from raw bytes."""
        return cls(source="bytes", format=format.lower() if format else None, _bytes=data)

    @classmethod
    def from_base64(cls, encoded: str, format: Optional[str] = None) -> "ImageData":
        """
        Create ImageData from a base64 string or data URL.

        Args:
            encoded: Base64 payload, optionally prefixed with
                ``data:image/<type>;base64,``
            format: Explicit image format, overrides the data-URL type

        Returns:
            ImageData with decoded bytes

        Raises:
            InvalidImageError: If the payload is empty or not valid base64
        """
        if not encoded or not encoded.strip():
            raise InvalidImageError("Base64 string cannot be empty")

        encoded = encoded.strip()
        match = DATA_URL_PATTERN.match(encoded)
        if match:
            format = format or match.group(1)
            encoded = encoded[match.end():]

        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidImageError(f"Image is not valid base64: {e}")

        return cls(source="base64", format=format.lower() if format else None, _bytes=data)

    @classmethod
    def from_file(cls, file_path: str) -> "ImageData":
        """
        Create ImageData from a file path.

        Raises:
            InvalidImageError: If the file does not exist
        """
        path = Path(file_path)
        if not path.is_file():
            raise InvalidImageError(f"Image file not found: {file_path}")

        suffix = path.suffix.lower().lstrip(".")
        format = suffix if suffix in FORMAT_TO_MIME else None
        return cls(source=str(path), format=format, _bytes=path.read_bytes())
