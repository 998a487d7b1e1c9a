"""Frame-to-identity recognition pipeline.

Decodes a camera frame, turns it upright, crops each detected face and
matches it against the identity registry. One call handles one frame and
returns a RecognitionOutcome snapshot for that frame.

The pipeline performs no internal concurrency. Callers must not run two
recognize_faces() calls on the same instance at the same time; FrameSampler
enforces this for streaming use.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set, Union

import numpy as np

from .constants import get_recognition_config
from .errors import OutOfBoundsError, PipelineDisposedError
from .imaging import (
    BoundingBox,
    RawFrame,
    crop_image,
    decode_frame,
    rotate_image,
    rotation_for_format,
    validate_raster,
)
from .recognition import (
    BaseIdentityMatcher,
    IdentityRecord,
    IdentityRegistry,
    MatchResult,
    RecognitionOutcome,
    is_accepted,
)

logger = logging.getLogger(__name__)

FrameSource = Union[RawFrame, np.ndarray]


class RecognitionPipeline:
    """Recognizes registered identities in camera frames."""

    def __init__(
        self,
        registry: Union[IdentityRegistry, Iterable[IdentityRecord]],
        matcher: BaseIdentityMatcher,
        sensor_orientation: Optional[int] = None,
        rotation_compensation: Optional[int] = None,
        threshold: Optional[float] = None,
        clamp_boxes: bool = False,
    ):
        """Initialize the pipeline.

        Args:
            registry: Known identities
            matcher: Identity matcher; the pipeline owns it and closes it
                on dispose()
            sensor_orientation: Camera sensor mounting angle in degrees
            rotation_compensation: Device rotation composed with the sensor
                angle for NV21 frames
            threshold: Maximum accepted distance (exclusive)
            clamp_boxes: Crop boxes that stick out of the frame to the
                frame instead of skipping them

        Missing values use the ``recognition`` config section.
        """
        config = get_recognition_config()
        self._threshold = float(threshold if threshold is not None else config.threshold)
        if self._threshold <= 0:
            raise ValueError(f"Threshold must be positive, got {self._threshold}")

        self.sensor_orientation = (
            sensor_orientation if sensor_orientation is not None else config.sensor_orientation
        )
        self.rotation_compensation = (
            rotation_compensation
            if rotation_compensation is not None
            else config.rotation_compensation
        )
        self.clamp_boxes = clamp_boxes

        if isinstance(registry, IdentityRegistry):
            self._registry = registry
        else:
            self._registry = IdentityRegistry(registry)
        self._matcher = matcher

        self._recognitions: Set[IdentityRecord] = set()
        self._last_distance: Optional[float] = None
        self._last_identity: Optional[IdentityRecord] = None
        self._disposed = False

        self._stats = {
            "frames_processed": 0,
            "faces_processed": 0,
            "faces_skipped": 0,
            "matches": 0,
        }

        logger.info(
            f"Recognition pipeline created ({len(self._registry)} identities, "
            f"threshold={self._threshold})"
        )

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def registry(self) -> IdentityRegistry:
        return self._registry

    @property
    def last_distance(self) -> Optional[float]:
        """Distance of the most recently matched face, across frames."""
        return self._last_distance

    @property
    def last_identity(self) -> Optional[IdentityRecord]:
        """Closest identity of the most recently matched face."""
        return self._last_identity

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def update_rotation_compensation(self, rotation_compensation: int) -> None:
        """Set the current device rotation used for NV21 frames."""
        self.rotation_compensation = rotation_compensation

    def prepare_image(self, frame: FrameSource) -> np.ndarray:
        """Return the upright RGB image for a frame.

        Raw frames are decoded and rotated according to their pixel
        format. Pre-decoded images are used as they are.

        Raises:
            UnsupportedFormatError: If the raw frame's format is unknown
            MalformedFrameError: If the raw frame buffer is inconsistent
            ValueError: If a pre-decoded image is not an RGB raster
        """
        if isinstance(frame, RawFrame):
            image = decode_frame(frame)
            angle = rotation_for_format(
                frame.pixel_format, self.sensor_orientation, self.rotation_compensation
            )
            if angle:
                image = rotate_image(image, angle)
            return image
        return validate_raster(frame)

    def recognize_faces(
        self,
        frame: FrameSource,
        boxes: Sequence[BoundingBox],
    ) -> RecognitionOutcome:
        """Recognize the faces delimited by ``boxes`` in ``frame``.

        A face counts as a match when its distance ``d`` satisfies
        ``0 <= d < threshold``. Problems with a single face (box outside
        the image, matcher failure) skip that face only; an undecodable
        frame fails the whole call.

        Args:
            frame: Raw camera frame or pre-decoded RGB image
            boxes: Face bounding boxes in processing order

        Returns:
            Outcome for this frame. ``last_distance`` is updated for every
            face that reaches the matcher, misses and unavailable results
            included, and carries over from the previous call only when no
            face was processed in this one.
        """
        if self._disposed:
            raise PipelineDisposedError("Pipeline has been disposed")

        self._recognitions.clear()
        order: List[IdentityRecord] = []

        image = self.prepare_image(frame)

        for index, box in enumerate(boxes):
            try:
                face = crop_image(image, box, clamp=self.clamp_boxes)
            except OutOfBoundsError as e:
                logger.warning(f"Skipping face {index}: {e}")
                self._stats["faces_skipped"] += 1
                continue

            result = self._match(index, face)
            self._last_identity = result.identity
            self._last_distance = result.distance
            self._stats["faces_processed"] += 1

            if result.is_comparable and is_accepted(result.distance, self._threshold):
                if result.identity not in self._recognitions:
                    order.append(result.identity)
                self._recognitions.add(result.identity)
                logger.info(f"Face recognized: {result.identity.name} ({result.distance:.3f})")
            else:
                logger.debug(f"Face {index} not recognized (distance={result.distance:.3f})")

        self._stats["frames_processed"] += 1
        self._stats["matches"] += len(self._recognitions)

        return RecognitionOutcome(
            matched=frozenset(self._recognitions),
            last_distance=self._last_distance,
            order=tuple(order),
        )

    def _match(self, index: int, face: np.ndarray) -> MatchResult:
        try:
            return self._matcher.best_match(face, self._registry)
        except Exception as e:
            logger.error(f"Matching failed for face {index}: {e}")
            return MatchResult.unavailable()

    def get_stats(self) -> dict:
        """Get pipeline statistics."""
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset pipeline statistics."""
        for key in self._stats:
            self._stats[key] = 0

    def dispose(self) -> None:
        """Release the matcher. Calling this more than once has no effect."""
        if self._disposed:
            return
        self._disposed = True
        try:
            self._matcher.close()
        finally:
            self._recognitions.clear()
            logger.info("Recognition pipeline disposed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False
