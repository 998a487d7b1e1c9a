"""Face detection backends.

Detection is a collaborator of the recognition pipeline: anything that
turns an RGB image into bounding boxes can implement BaseFaceDetector.

Available backends:
- haar_cascade: Fast, lightweight OpenCV Haar Cascades
"""

from .base import BaseFaceDetector
from .haar import HaarCascadeDetector

DETECTION_BACKENDS = {
    "haar_cascade": HaarCascadeDetector,
}

__all__ = [
    "BaseFaceDetector",
    "HaarCascadeDetector",
    "DETECTION_BACKENDS",
]
