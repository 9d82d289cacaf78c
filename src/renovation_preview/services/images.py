"""Image fetching interface and Pillow encode/decode helpers."""

import io
from typing import Protocol

from PIL import Image, UnidentifiedImageError


class ImageLoadError(RuntimeError):
    """Raised when an image cannot be fetched or decoded."""


class ImageClient(Protocol):
    """Interface for fetching image bytes by URL."""

    async def fetch_bytes(self, url: str) -> bytes:
        """Download an image and return its raw bytes."""


def decode_image(data: bytes) -> Image.Image:
    """Fully decode image bytes into a Pillow image."""
    if not data:
        raise ImageLoadError("Image payload is empty")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(f"Failed to decode image: {exc}") from exc
    return image


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    """Encode an image as JPEG."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def encode_png(image: Image.Image) -> bytes:
    """Encode an image as PNG."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
