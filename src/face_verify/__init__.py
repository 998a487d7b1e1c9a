"""face-verify - Main Package.

This package recognizes registered people in live camera frames: it
decodes sensor-native pixel formats, turns frames upright, crops detected
faces and matches them against known identities under a distance
threshold.
"""

__version__ = "0.1.0"

from .errors import (
    FaceVerifyError,
    FrameError,
    UnsupportedFormatError,
    MalformedFrameError,
    OutOfBoundsError,
    PipelineDisposedError,
)
from .imaging import (
    PixelFormat,
    RawFrame,
    BoundingBox,
    decode_frame,
    rotate_image,
    compose_rotation,
    rotation_for_format,
    crop_image,
)
from .recognition import (
    NO_COMPARISON,
    IdentityRecord,
    MatchResult,
    RecognitionOutcome,
    is_accepted,
    IdentityRegistry,
    BaseEmbeddingBackend,
    OpenFaceEmbeddingBackend,
    BaseIdentityMatcher,
    EmbeddingIdentityMatcher,
)
from .detection import BaseFaceDetector, HaarCascadeDetector
from .pipeline import RecognitionPipeline
from .sampler import FrameSampler

__all__ = [
    # Errors
    "FaceVerifyError", "FrameError", "UnsupportedFormatError",
    "MalformedFrameError", "OutOfBoundsError", "PipelineDisposedError",
    # Imaging
    "PixelFormat", "RawFrame", "BoundingBox", "decode_frame", "rotate_image",
    "compose_rotation", "rotation_for_format", "crop_image",
    # Recognition
    "NO_COMPARISON", "IdentityRecord", "MatchResult", "RecognitionOutcome",
    "is_accepted", "IdentityRegistry", "BaseEmbeddingBackend",
    "OpenFaceEmbeddingBackend", "BaseIdentityMatcher", "EmbeddingIdentityMatcher",
    # Detection
    "BaseFaceDetector", "HaarCascadeDetector",
    # Pipeline
    "RecognitionPipeline", "FrameSampler",
]
