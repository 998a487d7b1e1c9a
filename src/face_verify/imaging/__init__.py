"""Camera frame decoding and image geometry.

- types.py: PixelFormat, RawFrame, BoundingBox
- decoder.py: BGRA8888 and NV21 to RGB conversion
- transform.py: rotation and face cropping
"""

from .types import PixelFormat, RawFrame, BoundingBox, image_size, validate_raster
from .decoder import DECODERS, decode_frame, decode_bgra8888, decode_nv21
from .transform import rotate_image, compose_rotation, rotation_for_format, crop_image

__all__ = [
    "PixelFormat",
    "RawFrame",
    "BoundingBox",
    "image_size",
    "validate_raster",
    "DECODERS",
    "decode_frame",
    "decode_bgra8888",
    "decode_nv21",
    "rotate_image",
    "compose_rotation",
    "rotation_for_format",
    "crop_image",
]
