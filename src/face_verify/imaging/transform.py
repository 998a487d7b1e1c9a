"""Geometric operations on RGB rasters: rotation and face cropping."""

from typing import Union

import cv2
import numpy as np

from .types import BoundingBox, PixelFormat, image_size
from ..errors import OutOfBoundsError

_EXACT_ROTATIONS = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def rotate_image(image: np.ndarray, angle: Union[int, float]) -> np.ndarray:
    """Rotate an image clockwise by ``angle`` degrees.

    Quarter turns are exact. Any other angle is rendered onto a canvas
    large enough to hold the whole rotated image, padded with black.

    Args:
        image: Source image
        angle: Clockwise rotation in degrees, any value

    Returns:
        New rotated image (the source is never modified)
    """
    angle = angle % 360
    if angle == 0:
        return image.copy()

    image = np.ascontiguousarray(image)
    if angle in _EXACT_ROTATIONS:
        return cv2.rotate(image, _EXACT_ROTATIONS[int(angle)])

    h, w = image.shape[:2]
    center = (w / 2.0, h / 2.0)
    # OpenCV treats positive angles as counter-clockwise
    matrix = cv2.getRotationMatrix2D(center, -float(angle), 1.0)
    cos = abs(matrix[0, 0])
    sin = abs(matrix[0, 1])
    new_w = int(round(h * sin + w * cos))
    new_h = int(round(h * cos + w * sin))
    matrix[0, 2] += new_w / 2.0 - center[0]
    matrix[1, 2] += new_h / 2.0 - center[1]

    return cv2.warpAffine(
        image,
        matrix,
        (new_w, new_h),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=0,
    )


def compose_rotation(sensor_orientation: int, rotation_compensation: int) -> int:
    """Combine sensor mounting angle with device rotation, in [0, 360)."""
    return (sensor_orientation + rotation_compensation) % 360


def rotation_for_format(
    pixel_format: PixelFormat,
    sensor_orientation: int,
    rotation_compensation: int = 0,
) -> int:
    """Return the angle that turns a decoded frame upright.

    Packed BGRA frames come pre-compensated for device rotation and only
    need the sensor angle. NV21 frames need the sensor angle composed with
    the current device rotation.
    """
    if pixel_format == PixelFormat.NV21:
        return compose_rotation(sensor_orientation, rotation_compensation)
    return sensor_orientation % 360


def crop_image(image: np.ndarray, box: BoundingBox, clamp: bool = False) -> np.ndarray:
    """Extract the region of ``image`` delimited by ``box``.

    Box coordinates are truncated toward zero before slicing.

    Args:
        image: Source image
        box: Region to extract
        clamp: If True, intersect the box with the image instead of
            rejecting boxes that stick out of it

    Returns:
        Contiguous copy of the region

    Raises:
        OutOfBoundsError: If the region is empty or, without ``clamp``,
            not entirely inside the image
    """
    x, y, w, h = box.to_pixels()
    img_w, img_h = image_size(image)

    if clamp:
        x1, y1 = max(0, x), max(0, y)
        x2, y2 = min(img_w, x + w), min(img_h, y + h)
        if x2 <= x1 or y2 <= y1:
            raise OutOfBoundsError(
                f"Box {(x, y, w, h)} does not intersect {img_w}x{img_h} image"
            )
    else:
        if w <= 0 or h <= 0 or x < 0 or y < 0 or x + w > img_w or y + h > img_h:
            raise OutOfBoundsError(
                f"Box {(x, y, w, h)} outside {img_w}x{img_h} image"
            )
        x1, y1, x2, y2 = x, y, x + w, y + h

    return image[y1:y2, x1:x2].copy()
