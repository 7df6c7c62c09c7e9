"""
RGBA pixel buffer shared by every stage of the pipeline.

A PixelBuffer owns a (height, width, 4) uint8 numpy array. Filters never
mutate the buffer they receive: they return a new buffer, so the caller
that holds a buffer owns it exclusively.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import InvalidImageError, OutOfBoundsError


@dataclass(frozen=True)
class Color:
    """An RGB color with channels in [0, 255]."""

    r: int
    g: int
    b: int

    def distance_to(self, other: Color) -> float:
        """Euclidean distance in RGB space."""
        return math.sqrt(
            (self.r - other.r) ** 2
            + (self.g - other.g) ** 2
            + (self.b - other.b) ** 2
        )

    def quantized(self, step: int) -> Color:
        """Snap each channel to the nearest multiple of step (halves round up)."""
        return Color(
            int(math.floor(self.r / step + 0.5)) * step,
            int(math.floor(self.g / step + 0.5)) * step,
            int(math.floor(self.b / step + 0.5)) * step,
        )

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)


class PixelBuffer:
    """A width x height grid of RGBA pixels stored row-major.

    Attributes:
        data: numpy array of shape (height, width, 4) and dtype uint8.
    """

    __slots__ = ("data",)

    def __init__(self, data: np.ndarray):
        if not isinstance(data, np.ndarray):
            raise TypeError(f"Expected numpy.ndarray, got {type(data).__name__}")
        if data.ndim != 3 or data.shape[2] != 4:
            raise InvalidImageError(
                f"PixelBuffer data must have shape (H, W, 4), got {data.shape}"
            )
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise InvalidImageError(
                f"Image must have positive width and height, got "
                f"{data.shape[1]}x{data.shape[0]}"
            )
        if data.dtype != np.uint8:
            raise InvalidImageError(f"PixelBuffer data must be uint8, got {data.dtype}")
        self.data = data

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        fill: Color = WHITE,
        alpha: int = 255,
    ) -> PixelBuffer:
        """Create a buffer filled with a single opaque color."""
        if width <= 0 or height <= 0:
            raise InvalidImageError(
                f"Image must have positive width and height, got {width}x{height}"
            )
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[:, :, 0] = fill.r
        data[:, :, 1] = fill.g
        data[:, :, 2] = fill.b
        data[:, :, 3] = alpha
        return cls(data)

    @classmethod
    def from_array(cls, img: np.ndarray) -> PixelBuffer:
        """Build a buffer from a grayscale, RGB or RGBA numpy array.

        The array is copied. Grayscale and RGB inputs get an opaque alpha
        channel. Non-uint8 arrays must already hold values in [0, 255].

        Raises:
            TypeError: If img is not a numpy array.
            InvalidImageError: If the array is empty or has an unsupported shape.
        """
        if not isinstance(img, np.ndarray):
            raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")
        if img.size == 0:
            raise InvalidImageError("Image array is empty")

        if img.dtype != np.uint8:
            if np.issubdtype(img.dtype, np.floating) and not np.all(np.isfinite(img)):
                raise InvalidImageError("Image array contains non-finite values")
            if img.min() < 0 or img.max() > 255:
                raise InvalidImageError(
                    "Channel values must lie in [0, 255], got "
                    f"[{img.min()}, {img.max()}]"
                )
            img = np.rint(img).astype(np.uint8)

        if img.ndim == 2:
            rgba = np.empty(img.shape + (4,), dtype=np.uint8)
            rgba[:, :, 0] = img
            rgba[:, :, 1] = img
            rgba[:, :, 2] = img
            rgba[:, :, 3] = 255
        elif img.ndim == 3 and img.shape[2] == 3:
            rgba = np.empty(img.shape[:2] + (4,), dtype=np.uint8)
            rgba[:, :, :3] = img
            rgba[:, :, 3] = 255
        elif img.ndim == 3 and img.shape[2] == 4:
            rgba = img.copy()
        else:
            raise InvalidImageError(
                f"Unsupported image shape {img.shape}. "
                "Expected (H, W), (H, W, 3) or (H, W, 4)."
            )
        return cls(np.ascontiguousarray(rgba))

    @classmethod
    def from_image(cls, image) -> PixelBuffer:
        """Build a buffer from a Pillow image of any mode."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image, dtype=np.uint8))

    def to_array(self) -> np.ndarray:
        """Return a copy of the underlying (H, W, 4) array."""
        return self.data.copy()

    def to_image(self):
        """Return the buffer as an RGBA Pillow image."""
        from PIL import Image

        return Image.fromarray(self.data)

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the buffer."""
        return self.width, self.height

    @property
    def rgb(self) -> np.ndarray:
        """View of the R, G, B channels (no copy)."""
        return self.data[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel (no copy)."""
        return self.data[:, :, 3]

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(x, y, self.width, self.height)

    def get(self, x: int, y: int) -> Color:
        """Return the RGB color at (x, y).

        Raises:
            OutOfBoundsError: If (x, y) lies outside the buffer.
        """
        self._check_bounds(x, y)
        r, g, b = self.data[y, x, :3]
        return Color(int(r), int(g), int(b))

    def set(self, x: int, y: int, color: Color) -> None:
        """Set the RGB color at (x, y), leaving alpha untouched.

        Raises:
            OutOfBoundsError: If (x, y) lies outside the buffer.
            ValueError: If a channel is outside [0, 255].
        """
        self._check_bounds(x, y)
        for value in color.as_tuple():
            if not 0 <= value <= 255:
                raise ValueError(f"Channel value {value} outside [0, 255]")
        self.data[y, x, :3] = color.as_tuple()

    def clone(self) -> PixelBuffer:
        return PixelBuffer(self.data.copy())

    def with_rgb(self, rgb: np.ndarray) -> PixelBuffer:
        """Return a new buffer with these RGB channels and this buffer's alpha.

        Values are rounded half-to-even and clamped to [0, 255].
        """
        data = np.empty_like(self.data)
        if rgb.dtype == np.uint8:
            data[:, :, :3] = rgb
        else:
            data[:, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
        data[:, :, 3] = self.data[:, :, 3]
        return PixelBuffer(data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.data, other.data)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"
