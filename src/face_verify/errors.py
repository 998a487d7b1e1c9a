"""Exception types raised by the recognition pipeline."""


class FaceVerifyError(Exception):
    """Base class for all face-verify errors."""


class FrameError(FaceVerifyError, ValueError):
    """A raw frame could not be turned into an image.

    Fatal to the current frame only; the pipeline stays usable.
    """


class UnsupportedFormatError(FrameError):
    """The frame's pixel format tag has no decoder."""


class MalformedFrameError(FrameError):
    """The frame buffer does not match its declared geometry."""


class OutOfBoundsError(FaceVerifyError, ValueError):
    """A crop rectangle does not lie inside the source image."""


class PipelineDisposedError(FaceVerifyError, RuntimeError):
    """The pipeline was used after dispose()."""
