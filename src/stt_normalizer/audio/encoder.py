"""16-bit PCM WAV encoding."""

import io

import numpy as np
import soundfile as sf

from .decoder import INT16_MAX
from .errors import EncodeError


def quantize(samples: np.ndarray) -> np.ndarray:
    """Clamp float samples to [-1, 1] and truncate them to int16."""
    clamped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    return np.trunc(clamped * INT16_MAX).astype(np.int16)


def encode(mono_samples: np.ndarray, sample_rate: int, channel_count: int = 1) -> bytes:
    """Create a 16-bit PCM WAV file from float samples.

    Args:
        mono_samples: Float samples (interleaved when ``channel_count`` > 1)
        sample_rate: Sample rate written to the header
        channel_count: Channels written to the header

    Returns:
        WAV container bytes

    Raises:
        EncodeError: If the samples cannot be serialized
    """
    samples = np.asarray(mono_samples)
    if channel_count < 1 or samples.size % channel_count:
        raise EncodeError(
            f"Cannot write {samples.size} samples as {channel_count} channel(s)"
        )
    if not np.all(np.isfinite(samples)):
        raise EncodeError("Cannot quantize non-finite samples")

    pcm = quantize(samples).reshape(-1, channel_count)

    buffer = io.BytesIO()
    try:
        sf.write(buffer, pcm, sample_rate, subtype="PCM_16", format="WAV")
    except (RuntimeError, ValueError, TypeError) as e:
        raise EncodeError(f"Failed to write WAV: {e}") from e

    return buffer.getvalue()
