"""Conversion of sensor-native camera frames to RGB rasters.

Both decoders work on whole planes with numpy; nothing is computed per
pixel in Python. The output is always a contiguous uint8 array of shape
(height, width, 3) in RGB order.
"""

import logging
from typing import Callable, Dict, Optional

import numpy as np

from .types import PixelFormat, RawFrame
from ..constants import get_decoder_config
from ..errors import MalformedFrameError, UnsupportedFormatError

logger = logging.getLogger(__name__)

# 18-bit upper bound of the fixed-point YUV -> RGB intermediate values
_RGB_FIXED_MAX = 262143


def _check_geometry(frame: RawFrame) -> None:
    if frame.width <= 0 or frame.height <= 0:
        raise MalformedFrameError(
            f"Invalid frame size {frame.width}x{frame.height}"
        )


def decode_bgra8888(frame: RawFrame, header_offset: Optional[int] = None) -> np.ndarray:
    """Decode a packed BGRA frame.

    Pixel data starts ``header_offset`` bytes into the buffer; each row
    occupies ``bytes_per_row`` bytes of which the first ``4 * width`` hold
    B, G, R, A samples. Alpha is discarded.

    Args:
        frame: Raw BGRA8888 frame
        header_offset: Leading bytes to skip (uses config default if None)

    Returns:
        RGB image
    """
    _check_geometry(frame)
    if header_offset is None:
        header_offset = get_decoder_config().bgra_header_offset

    width, height = frame.width, frame.height
    row_bytes = width * 4
    stride = frame.bytes_per_row or row_bytes
    if stride < row_bytes:
        raise MalformedFrameError(
            f"Row stride {stride} is smaller than {row_bytes} bytes per row"
        )

    buf = np.frombuffer(frame.data, dtype=np.uint8)
    # The last row does not need to be padded out to the full stride
    required = header_offset + (height - 1) * stride + row_bytes
    if buf.size < required:
        raise MalformedFrameError(
            f"BGRA frame needs {required} bytes, got {buf.size}"
        )

    plane = buf[header_offset:header_offset + height * stride]
    if plane.size < height * stride:
        plane = np.concatenate(
            [plane, np.zeros(height * stride - plane.size, dtype=np.uint8)]
        )

    pixels = plane.reshape(height, stride)[:, :row_bytes].reshape(height, width, 4)
    return np.ascontiguousarray(pixels[:, :, [2, 1, 0]])


def decode_nv21(frame: RawFrame) -> np.ndarray:
    """Decode an NV21 (YUV 4:2:0 semi-planar) frame.

    The luma plane is followed by one V byte and one U byte for every 2x2
    block of luma samples. Conversion uses the integer coefficients of the
    classic Android fixed-point routine scaled by 1024:

        y = max(Y - 16, 0)
        r = 1192*y + 1634*v
        g = 1192*y - 833*v - 400*u
        b = 1192*y + 2066*u

    with r, g and b clamped to [0, 262143] before being reduced to 8 bits.

    Args:
        frame: Raw NV21 frame; ``bytes_per_row`` is the row stride of both
            planes and defaults to the frame width

    Returns:
        RGB image
    """
    _check_geometry(frame)

    width, height = frame.width, frame.height
    stride = frame.bytes_per_row or width
    if stride < width:
        raise MalformedFrameError(
            f"Row stride {stride} is smaller than frame width {width}"
        )

    frame_size = stride * height
    # Offset of the U byte of the last chroma pair, plus one
    required = frame_size + ((height - 1) >> 1) * stride + ((width - 1) & ~1) + 2
    buf = np.frombuffer(frame.data, dtype=np.uint8)
    if buf.size < required:
        raise MalformedFrameError(
            f"NV21 frame needs {required} bytes, got {buf.size}"
        )

    luma = buf[:frame_size].reshape(height, stride)[:, :width].astype(np.int32)
    y = np.maximum(luma - 16, 0)

    # Chroma is shared by each pair of columns and each pair of rows
    row_offsets = (np.arange(height) >> 1) * stride
    col_offsets = np.arange(width) & ~1
    uvp = frame_size + row_offsets[:, None] + col_offsets[None, :]
    v = buf[uvp].astype(np.int32) - 128
    u = buf[uvp + 1].astype(np.int32) - 128

    y1192 = 1192 * y
    r = np.clip(y1192 + 1634 * v, 0, _RGB_FIXED_MAX)
    g = np.clip(y1192 - 833 * v - 400 * u, 0, _RGB_FIXED_MAX)
    b = np.clip(y1192 + 2066 * u, 0, _RGB_FIXED_MAX)

    out = np.empty((height, width, 3), dtype=np.uint8)
    out[:, :, 0] = ((r << 6) & 0xFF0000) >> 16
    out[:, :, 1] = ((g >> 2) & 0xFF00) >> 8
    out[:, :, 2] = (b >> 10) & 0xFF
    return out


DECODERS: Dict[PixelFormat, Callable[[RawFrame], np.ndarray]] = {
    PixelFormat.BGRA8888: decode_bgra8888,
    PixelFormat.NV21: decode_nv21,
}


def decode_frame(frame: RawFrame) -> np.ndarray:
    """Decode a raw frame into an RGB raster.

    Raises:
        UnsupportedFormatError: If the format tag has no decoder
        MalformedFrameError: If the buffer does not match the frame geometry
    """
    decoder = DECODERS.get(frame.pixel_format)
    if decoder is None:
        raise UnsupportedFormatError(
            f"Unsupported pixel format: {frame.pixel_format!r}. "
            f"Available: {[f.value for f in DECODERS]}"
        )
    return decoder(frame)
