"""Sample decoding and normalization."""

import io
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
import soundfile as sf

from .errors import DecodeError
from .formats import AudioFormatDescriptor, SampleEncoding
from ..utils.logging import get_logger

logger = get_logger(__name__)

INT16_MAX = 32767
INT24_MAX = 0x7FFFFF
INT32_MAX = 2147483647


@dataclass
class NormalizedSampleBuffer:
    """Interleaved float32 samples in [-1.0, 1.0]."""

    samples: np.ndarray
    channel_count: int
    sample_rate: int

    @property
    def frame_count(self) -> int:
        return len(self.samples) // self.channel_count


# (encoding, bits) -> (soundfile read dtype, right shift, full-scale divisor)
# libsndfile left-aligns 24-bit samples in an int32, hence the shift.
_READ_LAYOUTS: Dict[Tuple[SampleEncoding, int], Tuple[str, int, float]] = {
    (SampleEncoding.FLOAT, 32): ("float32", 0, 1.0),
    (SampleEncoding.INTEGER, 16): ("int16", 0, float(INT16_MAX)),
    (SampleEncoding.INTEGER, 24): ("int32", 8, float(INT24_MAX)),
    (SampleEncoding.INTEGER, 32): ("int32", 0, float(INT32_MAX)),
}


def decode(audio_data: bytes, audio_format: AudioFormatDescriptor) -> NormalizedSampleBuffer:
    """Read samples and normalize them to float amplitude.

    Args:
        audio_data: WAV container bytes
        audio_format: Descriptor previously detected for ``audio_data``

    Returns:
        Normalized interleaved samples

    Raises:
        DecodeError: If the encoding/bit depth is unsupported or reading fails
    """
    layout = _READ_LAYOUTS.get((audio_format.sample_encoding, audio_format.bits_per_sample))
    if layout is None:
        raise DecodeError(
            f"Unsupported audio format: {audio_format.bits_per_sample}-bit "
            f"{audio_format.sample_encoding.value}"
        )
    dtype, shift, full_scale = layout

    try:
        frames, _ = sf.read(io.BytesIO(audio_data), dtype=dtype, always_2d=True)
    except (RuntimeError, ValueError, TypeError, EOFError) as e:
        raise DecodeError(f"Failed to read samples: {e}") from e

    if frames.shape[1] != audio_format.channel_count:
        raise DecodeError(
            f"Expected {audio_format.channel_count} channel(s), "
            f"decoded {frames.shape[1]}"
        )

    # Row-major flattening of (frames, channels) is the interleaved layout
    interleaved = frames.reshape(-1)

    if audio_format.sample_encoding is SampleEncoding.FLOAT:
        samples = interleaved.astype(np.float32, copy=False)
    else:
        if shift:
            interleaved = interleaved >> shift
        samples = (interleaved.astype(np.float64) / full_scale).astype(np.float32)

    logger.debug(
        "Decoded samples",
        extra={
            "frames": frames.shape[0],
            "channels": audio_format.channel_count,
            "source_format": audio_format.describe(),
        }
    )

    return NormalizedSampleBuffer(
        samples=samples,
        channel_count=audio_format.channel_count,
        sample_rate=audio_format.sample_rate,
    )
