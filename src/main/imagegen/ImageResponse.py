"""
Result types produced by image generators.

A generator returns exactly one of RemoteImage (the provider hosts the image)
or InlineImage (the provider sent base64 data). ImageMaterializer turns either
one into a file.
"""
from dataclasses import dataclass
from typing import Any, Optional


def _detect_image_type(data: bytes) -> str:
    """
    Detect image type from binary data using magic bytes.
    
    Args:
        data: Binary image data
        
    Returns:
        Image type string ("jpeg", "png", "gif", "webp", or "unknown")
    """
    if not data:
        return "unknown"
    
    # Check magic bytes
    if data.startswith(b'\xff\xd8\xff'):
        return "jpeg"
    elif data.startswith(b'\x89PNG\r\n\x1a\n'):
        return "png"
    elif data.startswith(b'GIF87a') or data.startswith(b'GIF89a'):
        return "gif"
    elif data.startswith(b'RIFF') and b'WEBP' in data[:12]:
        return "webp"
    else:
        return "unknown"


@dataclass(frozen=True)
class ImageResponse:
    """
    Fields shared by every generation result.

    Attributes:
        revised_prompt: Optional revised prompt from the provider
        raw: Raw response data from the provider (for debugging)
    """
    revised_prompt: Optional[str] = None
    raw: Any = None

    kind = "none"


@dataclass(frozen=True)
class RemoteImage(ImageResponse):
    """An image the provider hosts at a URL."""
    url: str = ""

    kind = "url"

    def __post_init__(self):
        if not isinstance(self.url, str) or not self.url:
            raise ValueError(f"RemoteImage requires a URL, got {self.url!r}")


@dataclass(frozen=True)
class InlineImage(ImageResponse):
    """An image returned inline as base64 text."""
    data: str = ""
    encoding: str = "base64"

    kind = "base64"

    def __post_init__(self):
        if not isinstance(self.data, str) or not self.data:
            raise ValueError(f"InlineImage requires base64 text, got {type(self.data).__name__}")
