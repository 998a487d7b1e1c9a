"""Base face detector interface."""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from ..imaging.types import BoundingBox


class BaseFaceDetector(ABC):
    """Abstract base class for face detectors."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[BoundingBox]:
        """Detect faces in an image.

        Args:
            image: RGB image as numpy array

        Returns:
            Bounding boxes in detection order
        """
        pass

    def close(self) -> None:
        """Release detector resources."""
        pass
