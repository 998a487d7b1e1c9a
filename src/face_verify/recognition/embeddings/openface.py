"""OpenCV DNN face embedding backend using OpenFace."""

import logging
import urllib.request
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from .base import BaseEmbeddingBackend
from ...constants import DEFAULT_MODEL_DIR, get_embedding_config

logger = logging.getLogger(__name__)


class OpenFaceEmbeddingBackend(BaseEmbeddingBackend):
    """Face embedding using OpenFace model via OpenCV DNN (128D).

    The network is loaded lazily on the first extraction and downloaded
    into the model directory when missing.
    """

    MODEL_URL = (
        "https://raw.githubusercontent.com/pyannote/pyannote-data/master/openface.nn4.small2.v1.t7"
    )
    MODEL_FILENAME = "openface_nn4.small2.v1.t7"

    def __init__(
        self,
        model_path: Optional[Union[str, Path]] = None,
        input_size: Optional[Tuple[int, int]] = None,
    ):
        """Initialize OpenFace embedding backend.

        Args:
            model_path: Path to OpenFace model file (.t7); uses config
                default, then the model directory, if None
            input_size: Network input size (uses config default if None)
        """
        config = get_embedding_config()
        self._model_path = model_path or config.model_path
        self.input_size = tuple(input_size or config.input_size)
        self._net: Optional[cv2.dnn.Net] = None
        self._initialized = False

    @property
    def name(self) -> str:
        return "openface"

    @property
    def embedding_dim(self) -> int:
        return 128

    def _initialize(self) -> bool:
        """Lazy initialization of OpenFace model."""
        if self._initialized:
            return self._net is not None

        self._initialized = True

        model_dir = DEFAULT_MODEL_DIR / "face_recognition"
        model_file = Path(self._model_path) if self._model_path else model_dir / self.MODEL_FILENAME

        if not model_file.exists():
            model_file.parent.mkdir(parents=True, exist_ok=True)
            if not self._download_model(model_file):
                logger.warning("OpenFace model not available")
                return False

        try:
            self._net = cv2.dnn.readNetFromTorch(str(model_file))
            logger.info(f"Loaded OpenFace model from {model_file}")
            return True
        except cv2.error as e:
            logger.error(f"Failed to load OpenFace model: {e}")
            return False

    def _download_model(self, target_path: Path) -> bool:
        """Download OpenFace model if not present."""
        try:
            logger.info(f"Downloading OpenFace model to {target_path}...")
            urllib.request.urlretrieve(self.MODEL_URL, str(target_path))
            logger.info("OpenFace model downloaded successfully")
            return True
        except OSError as e:
            logger.error(f"Failed to download OpenFace model: {e}")
            return False

    def extract(self, face_image: np.ndarray) -> Optional[np.ndarray]:
        """Extract 128D embedding using OpenFace.

        Args:
            face_image: RGB face image

        Returns:
            L2-normalized 128D embedding vector or None
        """
        if face_image is None or face_image.size == 0:
            return None
        if not self._initialize():
            return None

        try:
            # Input is already RGB, which is what OpenFace was trained on
            blob = cv2.dnn.blobFromImage(
                face_image,
                scalefactor=1.0 / 255,
                size=self.input_size,
                mean=(0, 0, 0),
                swapRB=False,
                crop=False,
            )

            self._net.setInput(blob)
            embedding = self._net.forward().flatten()
        except cv2.error as e:
            logger.error(f"Error extracting embedding: {e}")
            return None

        norm = np.linalg.norm(embedding)
        if norm < 1e-10:
            return None
        return (embedding / norm).astype(np.float32)

    def close(self) -> None:
        """Drop the loaded network."""
        self._net = None
