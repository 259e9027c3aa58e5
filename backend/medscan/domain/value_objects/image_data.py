"""
Image Data Value Object

Represents a captured photo passed to a scan.
"""

from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import base64


FORMAT_BY_SUFFIX = {
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
    ".gif": "gif",
    ".bmp": "bmp",
    ".webp": "webp",
}


@dataclass(frozen=True)
class ImageData:
    """
    Immutable captured image.

    Can be constructed from a file path, raw bytes, or a base64 string
    (optionally a data URL as sent by mobile clients).

    Attributes:
        uri: Where the capture came from (file path, upload name or client URI).
             Stored on scan history as ``imageUri``.
        format: Image format (e.g., "jpeg", "png")
        _bytes: Raw image bytes (internal)
        _base64: Base64 encoded image (internal)
    """

    uri: Optional[str] = None
    format: Optional[str] = None
    _bytes: Optional[bytes] = field(default=None, repr=False)
    _base64: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self._bytes is None and self._base64 is None and self.uri is None:
            raise ValueError("ImageData must have at least one of: bytes, base64, or uri")

    @property
    def bytes(self) -> bytes:
        """
        Raw image bytes, read from ``uri`` if it names a local file.

        Raises:
            ValueError: If no data source is available or base64 is invalid
        """
        if self._bytes is not None:
            return self._bytes

        if self._base64 is not None:
            return base64.b64decode(self._base64, validate=True)

        if self.uri is not None:
            path = Path(self.uri)
            if path.is_file():
                return path.read_bytes()

        raise ValueError("Cannot load image bytes: no valid source available")

    @property
    def base64_string(self) -> str:
        """Base64 content, as the vision service expects it."""
        if self._base64 is not None:
            return self._base64
        return base64.b64encode(self.bytes).decode("utf-8")

    def with_bytes(self, data: bytes, format: Optional[str] = None) -> "ImageData":
        """Copy with new content (e.g. after resizing), keeping the uri."""
        return ImageData(uri=self.uri, format=format or self.format, _bytes=data)

    def __len__(self) -> int:
        return len(self.bytes)

    def __str__(self) -> str:
        return f"ImageData({self.uri or 'in-memory'}, {self.format or 'unknown format'})"

    @classmethod
    def from_file(cls, file_path: str) -> "ImageData":
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {file_path}")

        return cls(
            uri=str(path.absolute()),
            format=FORMAT_BY_SUFFIX.get(path.suffix.lower()),
            _bytes=path.read_bytes()
        )

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        format: Optional[str] = None,
        uri: Optional[str] = None
    ) -> "ImageData":
        return cls(uri=uri, format=format, _bytes=data)

    @classmethod
    def from_base64(
        cls,
        base64_string: str,
        format: Optional[str] = None,
        uri: Optional[str] = None
    ) -> "ImageData":
        """
        Create ImageData from base64, accepting ``data:image/...;base64,`` URLs.
        """
        if base64_string.startswith("data:"):
            header, base64_data = base64_string.split(",", 1)
            if "image/" in header:
                format = header.split("image/")[1].split(";")[0]
            base64_string = base64_data

        return cls(uri=uri, format=format, _base64=base64_string)
