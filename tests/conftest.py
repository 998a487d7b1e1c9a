"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from face_verify.detection import BaseFaceDetector  # noqa: E402
from face_verify.imaging import BoundingBox  # noqa: E402
from face_verify.recognition import (  # noqa: E402
    BaseIdentityMatcher,
    IdentityRecord,
    MatchResult,
)


class ScriptedMatcher(BaseIdentityMatcher):
    """Matcher that returns scripted results in call order.

    Each entry is ``(name, distance)``; the name is looked up in the
    registry passed to best_match. A ``None`` name yields the
    unavailable sentinel.
    """

    def __init__(self, script: Sequence[tuple]):
        self.script = list(script)
        self.calls: List[np.ndarray] = []
        self.close_count = 0

    def best_match(self, face_image, registry):
        self.calls.append(face_image)
        name, distance = self.script[(len(self.calls) - 1) % len(self.script)]
        if name is None:
            return MatchResult.unavailable()
        records: Dict[str, IdentityRecord] = {r.name: r for r in registry}
        return MatchResult(identity=records[name], distance=distance)

    def close(self):
        self.close_count += 1


class FixedBoxDetector(BaseFaceDetector):
    """Detector that always reports the same boxes."""

    def __init__(self, boxes: Optional[Sequence[BoundingBox]] = None):
        self.boxes = list(boxes or [])
        self.images: List[np.ndarray] = []
        self.closed = False

    def detect(self, image):
        self.images.append(image)
        return list(self.boxes)

    def close(self):
        self.closed = True


@pytest.fixture
def sample_image():
    """Create a sample RGB test image."""
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, (120, 160, 3), dtype=np.uint8)


@pytest.fixture
def alice():
    """Identity record for Alice."""
    return IdentityRecord(name="Alice", embedding=np.ones(128, dtype=np.float32))


@pytest.fixture
def bob():
    """Identity record for Bob."""
    return IdentityRecord(name="Bob", embedding=np.zeros(128, dtype=np.float32))


@pytest.fixture
def scripted_matcher():
    """Factory for scripted matchers."""
    return ScriptedMatcher


@pytest.fixture
def fixed_detector():
    """Factory for fixed-box detectors."""
    return FixedBoxDetector
