"""Decoding and encoding of image files at the edge of the pipeline."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .buffer import PixelBuffer
from .errors import InvalidImageError


def load_image(source: str | Path | bytes) -> PixelBuffer:
    """Decode an image file or raw bytes into an RGBA PixelBuffer.

    Raises:
        InvalidImageError: If the data cannot be decoded or has zero area.
        FileNotFoundError: If a path does not exist.
    """
    if isinstance(source, bytes):
        handle = io.BytesIO(source)
        label = "<bytes>"
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {path}")
        handle = path
        label = str(path)

    try:
        with Image.open(handle) as image:
            image.load()
            return PixelBuffer.from_image(image)
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError(f"Cannot decode image {label}: {e}") from e


def save_image(buffer: PixelBuffer, path: str | Path) -> Path:
    """Write a buffer as PNG, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    buffer.to_image().save(path, format="PNG")
    return path
