"""Frame sampling driver for live camera streams."""

import logging
import threading
from typing import Callable, Iterable, Iterator, Optional

from .constants import get_sampler_config
from .detection import BaseFaceDetector
from .pipeline import FrameSource, RecognitionPipeline
from .recognition import RecognitionOutcome

logger = logging.getLogger(__name__)


class FrameSampler:
    """Feeds every Nth camera frame through detection and recognition.

    Frames that arrive while a previous frame is still being processed are
    dropped, so the pipeline never sees two calls at once.
    """

    def __init__(
        self,
        pipeline: RecognitionPipeline,
        detector: BaseFaceDetector,
        frame_skip_count: Optional[int] = None,
        on_outcome: Optional[Callable[[RecognitionOutcome], None]] = None,
        on_match: Optional[Callable[[RecognitionOutcome], None]] = None,
    ):
        """Initialize the sampler.

        Args:
            pipeline: Recognition pipeline to drive
            detector: Face detector run on the upright image
            frame_skip_count: Process one frame out of this many (uses
                config default if None)
            on_outcome: Callback for every processed frame
            on_match: Callback for processed frames with a recognized face
        """
        self.pipeline = pipeline
        self.detector = detector
        self.frame_skip_count = (
            frame_skip_count if frame_skip_count is not None else get_sampler_config().frame_skip_count
        )
        if self.frame_skip_count < 1:
            raise ValueError(f"frame_skip_count must be >= 1, got {self.frame_skip_count}")

        self._on_outcome = on_outcome
        self._on_match = on_match

        self._busy = threading.Lock()
        # Guards the frame counter and stats; submit() may be called from any thread
        self._count_lock = threading.Lock()
        self._frame_count = 0
        self.last_outcome: Optional[RecognitionOutcome] = None

        self._stats = {
            "frames_received": 0,
            "frames_processed": 0,
            "frames_dropped": 0,
        }

    @property
    def is_busy(self) -> bool:
        """Check if a frame is currently being processed."""
        return self._busy.locked()

    def submit(self, frame: FrameSource) -> Optional[RecognitionOutcome]:
        """Offer a frame to the sampler.

        Args:
            frame: Raw camera frame or RGB image

        Returns:
            The outcome if this frame was processed, None if it was
            skipped or dropped
        """
        with self._count_lock:
            self._frame_count += 1
            self._stats["frames_received"] += 1
            sampled = self._frame_count % self.frame_skip_count == 0

        if not sampled:
            return None

        if not self._busy.acquire(blocking=False):
            with self._count_lock:
                self._stats["frames_dropped"] += 1
            logger.debug("Pipeline busy, frame dropped")
            return None

        try:
            image = self.pipeline.prepare_image(frame)
            boxes = self.detector.detect(image)
            outcome = self.pipeline.recognize_faces(image, boxes)
        finally:
            self._busy.release()

        with self._count_lock:
            self._stats["frames_processed"] += 1
        self.last_outcome = outcome

        if self._on_outcome:
            try:
                self._on_outcome(outcome)
            except Exception as e:
                logger.error(f"Outcome callback error: {e}")

        if outcome.recognized and self._on_match:
            try:
                self._on_match(outcome)
            except Exception as e:
                logger.error(f"Match callback error: {e}")

        return outcome

    def run(
        self,
        frames: Iterable[FrameSource],
        stop_on_match: bool = False,
    ) -> Iterator[RecognitionOutcome]:
        """Process a stream of frames, yielding outcomes of sampled frames.

        Args:
            frames: Frame iterable, e.g. a camera reader
            stop_on_match: Stop after the first frame with a recognized face
        """
        for frame in frames:
            outcome = self.submit(frame)
            if outcome is None:
                continue
            yield outcome
            if stop_on_match and outcome.recognized:
                logger.info(f"Recognized {outcome.names}, stopping")
                return

    def get_stats(self) -> dict:
        """Get sampler statistics."""
        with self._count_lock:
            return self._stats.copy()

    def close(self) -> None:
        """Dispose the pipeline and release the detector."""
        try:
            self.detector.close()
        finally:
            self.pipeline.dispose()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
