"""Frame, image and bounding box data types."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np


class PixelFormat(Enum):
    """Sensor-native pixel layouts delivered by camera streams.

    - BGRA8888: single packed plane, 4 bytes per pixel (B, G, R, A) after
      a fixed header
    - NV21: luma plane followed by interleaved V/U chroma at half
      resolution in both directions (4:2:0)
    """
    BGRA8888 = "bgra8888"
    NV21 = "nv21"


@dataclass(frozen=True)
class RawFrame:
    """Opaque sensor frame owned by the caller for one pipeline call."""

    data: bytes
    width: int
    height: int
    pixel_format: PixelFormat
    bytes_per_row: Optional[int] = None

    @classmethod
    def from_planes(
        cls,
        planes: Sequence[bytes],
        width: int,
        height: int,
        pixel_format: PixelFormat,
        bytes_per_row: Optional[int] = None,
    ) -> "RawFrame":
        """Build a frame from plane buffers laid out back to back."""
        return cls(
            data=b"".join(bytes(p) for p in planes),
            width=width,
            height=height,
            pixel_format=pixel_format,
            bytes_per_row=bytes_per_row,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Return frame size as (width, height)."""
        return (self.width, self.height)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned face rectangle in image pixel coordinates."""

    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_xywh(cls, xywh: Sequence[float]) -> "BoundingBox":
        """Create from an (x, y, w, h) sequence."""
        x, y, w, h = xywh
        return cls(left=x, top=y, width=w, height=h)

    @classmethod
    def from_corners(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create from top-left and bottom-right corners."""
        return cls(left=x1, top=y1, width=x2 - x1, height=y2 - y1)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_pixels(self) -> Tuple[int, int, int, int]:
        """Return (x, y, w, h) truncated toward zero."""
        return (int(self.left), int(self.top), int(self.width), int(self.height))


def image_size(image: np.ndarray) -> Tuple[int, int]:
    """Return raster size as (width, height)."""
    return (int(image.shape[1]), int(image.shape[0]))


def validate_raster(image: np.ndarray) -> np.ndarray:
    """Check that ``image`` is an RGB raster: uint8, shape (H, W, 3).

    Raises:
        ValueError: If the array does not have that layout
    """
    if not isinstance(image, np.ndarray):
        raise ValueError(f"Expected numpy array, got {type(image).__name__}")
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(
            f"Expected uint8 image of shape (H, W, 3), got {image.dtype} {image.shape}"
        )
    return image
