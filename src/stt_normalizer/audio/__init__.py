"""
Audio conversion module for the STT normalizer.

This module handles format detection, sample decoding, downmixing,
resampling and PCM re-encoding, with an FFmpeg fallback for anything
the native path cannot handle.
"""

from .converter import (
    ConversionPlanner,
    ConversionResult,
    ConversionRoute,
    ConversionState,
    FallbackReason,
    convert_to_whisper_format,
)
from .errors import (
    ConversionError,
    DecodeError,
    EncodeError,
    FallbackError,
    NativeConversionError,
    ResampleError,
)
from .formats import TARGET_FORMAT, AudioFormatDescriptor, SampleEncoding, detect

__all__ = [
    "AudioFormatDescriptor",
    "ConversionError",
    "ConversionPlanner",
    "ConversionResult",
    "ConversionRoute",
    "ConversionState",
    "DecodeError",
    "EncodeError",
    "FallbackError",
    "FallbackReason",
    "NativeConversionError",
    "ResampleError",
    "SampleEncoding",
    "TARGET_FORMAT",
    "convert_to_whisper_format",
    "detect",
]
