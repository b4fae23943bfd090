"""Audio format detection."""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import soundfile as sf

from ..utils.logging import get_logger

logger = get_logger(__name__)


class SampleEncoding(str, Enum):
    """How individual samples are stored."""

    INTEGER = "integer"
    FLOAT = "float"


@dataclass(frozen=True)
class AudioFormatDescriptor:
    """Format information extracted from a container header."""

    sample_rate: int
    channel_count: int
    bits_per_sample: int
    sample_encoding: SampleEncoding

    def describe(self) -> str:
        """Human readable summary for logging."""
        kind = "PCM integer" if self.sample_encoding is SampleEncoding.INTEGER else "IEEE float"
        return (
            f"{self.sample_rate}Hz, {self.channel_count} channel(s), "
            f"{self.bits_per_sample}-bit {kind}"
        )


# What the speech-recognition engine consumes
TARGET_FORMAT = AudioFormatDescriptor(
    sample_rate=16000,
    channel_count=1,
    bits_per_sample=16,
    sample_encoding=SampleEncoding.INTEGER,
)


@dataclass(frozen=True)
class ConversionPlan:
    """Which conversion steps a given input format requires."""

    needs_mix: bool
    needs_resample: bool
    needs_requantize: bool

    @classmethod
    def for_format(cls, audio_format: AudioFormatDescriptor) -> "ConversionPlan":
        return cls(
            needs_mix=audio_format.channel_count > 1,
            needs_resample=audio_format.sample_rate != TARGET_FORMAT.sample_rate,
            needs_requantize=(
                audio_format.bits_per_sample != TARGET_FORMAT.bits_per_sample
                or audio_format.sample_encoding is not TARGET_FORMAT.sample_encoding
            ),
        )


# Containers the native path understands
SUPPORTED_CONTAINERS = frozenset({"WAV", "WAVEX"})

# libsndfile subtype -> (bits per sample, encoding)
SUBTYPE_LAYOUTS: Dict[str, Tuple[int, SampleEncoding]] = {
    "PCM_S8": (8, SampleEncoding.INTEGER),
    "PCM_U8": (8, SampleEncoding.INTEGER),
    "PCM_16": (16, SampleEncoding.INTEGER),
    "PCM_24": (24, SampleEncoding.INTEGER),
    "PCM_32": (32, SampleEncoding.INTEGER),
    "FLOAT": (32, SampleEncoding.FLOAT),
    "DOUBLE": (64, SampleEncoding.FLOAT),
}


def detect(audio_data: bytes) -> Optional[AudioFormatDescriptor]:
    """Detect the format of WAV audio data.

    Args:
        audio_data: Raw container bytes

    Returns:
        Descriptor of the stored samples, or None when the container is not
        a linear PCM / IEEE float WAV file. None is a routing signal for the
        fallback converter, not an error.
    """
    if not audio_data:
        return None

    try:
        info = sf.info(io.BytesIO(audio_data))
    except (RuntimeError, ValueError, TypeError, EOFError) as e:
        logger.debug(f"Container header not recognized: {e}")
        return None

    if info.format not in SUPPORTED_CONTAINERS:
        logger.debug(f"Unsupported container for native conversion: {info.format}")
        return None

    layout = SUBTYPE_LAYOUTS.get(info.subtype)
    if layout is None:
        logger.debug(f"Unsupported sample subtype for native conversion: {info.subtype}")
        return None

    if info.samplerate <= 0 or info.channels < 1:
        return None

    bits_per_sample, encoding = layout
    return AudioFormatDescriptor(
        sample_rate=int(info.samplerate),
        channel_count=int(info.channels),
        bits_per_sample=bits_per_sample,
        sample_encoding=encoding,
    )
