"""Tests for the OpenCV detection and embedding adapters."""

import numpy as np
import pytest


class TestHaarCascadeDetector:
    """Test cases for HaarCascadeDetector."""

    def test_empty_image_detection(self):
        """A black image has no faces."""
        from face_verify import HaarCascadeDetector

        detector = HaarCascadeDetector()
        faces = detector.detect(np.zeros((100, 100, 3), dtype=np.uint8))

        assert isinstance(faces, list)
        assert len(faces) == 0

    def test_config_defaults(self):
        """Unset parameters come from the detection config."""
        from face_verify import HaarCascadeDetector

        detector = HaarCascadeDetector(min_neighbors=3)

        assert detector.min_neighbors == 3
        assert detector.scale_factor == pytest.approx(1.1)
        assert detector.min_size == (30, 30)

    def test_backend_registry(self):
        """The Haar detector is registered by name."""
        from face_verify.detection import DETECTION_BACKENDS, HaarCascadeDetector

        assert DETECTION_BACKENDS["haar_cascade"] is HaarCascadeDetector


class TestEmbeddingBackends:
    """Test cases for embedding backend construction."""

    def test_create_known_backend(self):
        """Backends are built by name without loading a model."""
        from face_verify.recognition import OpenFaceEmbeddingBackend, create_embedding_backend

        backend = create_embedding_backend("openface", input_size=(96, 96))

        assert isinstance(backend, OpenFaceEmbeddingBackend)
        assert backend.embedding_dim == 128
        assert backend.input_size == (96, 96)

    def test_create_unknown_backend(self):
        """Unknown names raise ValueError."""
        from face_verify.recognition import create_embedding_backend

        with pytest.raises(ValueError):
            create_embedding_backend("invalid_backend")

    def test_empty_face_not_extracted(self):
        """Empty crops return None before any model is touched."""
        from face_verify.recognition import OpenFaceEmbeddingBackend

        backend = OpenFaceEmbeddingBackend()

        assert backend.extract(np.zeros((0, 0, 3), dtype=np.uint8)) is None
        assert not backend._initialized

    def test_euclidean_distance(self):
        """Default distance is Euclidean."""
        from face_verify.recognition import OpenFaceEmbeddingBackend

        backend = OpenFaceEmbeddingBackend()

        assert backend.distance(np.array([0.0, 3.0]), np.array([4.0, 0.0])) == pytest.approx(5.0)

    def test_distances_one_to_many(self):
        """Batch distances give one Euclidean value per row."""
        from face_verify.recognition import OpenFaceEmbeddingBackend

        backend = OpenFaceEmbeddingBackend()
        matrix = np.array([[0.0, 0.0], [3.0, 4.0], [0.0, 1.0]])

        distances = backend.distances(np.array([0.0, 0.0]), matrix)

        assert distances.tolist() == pytest.approx([0.0, 5.0, 1.0])


class TestOpenCVInstall:
    """Test cases for the installed OpenCV build."""

    def test_cascade_classifier_available(self):
        """The pinned OpenCV major version still ships CascadeClassifier."""
        import cv2

        assert int(cv2.__version__.split(".")[0]) == 4
        assert hasattr(cv2, "CascadeClassifier")

    def test_requirements_pin_opencv_major(self):
        """requirements.txt keeps OpenCV below the next major release."""
        from pathlib import Path

        requirements = Path(__file__).resolve().parents[1] / "requirements.txt"
        lines = [line.strip() for line in requirements.read_text().splitlines()]

        assert "opencv-python>=4.8.0,<5" in lines
