"""Audio conversion errors."""

from typing import Optional


class ConversionError(Exception):
    """Base class for audio conversion failures."""
    pass


class NativeConversionError(ConversionError):
    """Raised by a stage of the in-process conversion path.

    These never reach callers of the converter; they request the fallback.
    """
    pass


class DecodeError(NativeConversionError):
    """Sample encoding or bit depth is unsupported, or the data is corrupt."""
    pass


class ResampleError(NativeConversionError):
    """Resampler construction or chunk processing failed."""
    pass


class EncodeError(NativeConversionError):
    """PCM serialization failed."""
    pass


class FallbackError(ConversionError):
    """The external transcoder failed; no further conversion tier exists."""

    def __init__(
        self,
        message: str,
        stderr: Optional[str] = None,
        returncode: Optional[int] = None
    ):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode
