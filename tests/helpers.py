"""Audio fixtures shared by the test modules."""

import io

import numpy as np
import soundfile as sf


def make_wav(
    samples: np.ndarray,
    sample_rate: int,
    subtype: str = "PCM_16",
    container: str = "WAV"
) -> bytes:
    """Write samples (frames x channels, or 1-D mono) to WAV bytes."""
    buffer = io.BytesIO()
    sf.write(buffer, samples, sample_rate, subtype=subtype, format=container)
    return buffer.getvalue()


def sine(frequency: float, sample_rate: int, frame_count: int, amplitude: float = 1.0) -> np.ndarray:
    """Sine wave as float64 samples."""
    t = np.arange(frame_count) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def pcm16(values: np.ndarray) -> np.ndarray:
    """Quantize floats the way the encoder does."""
    return np.trunc(np.clip(values, -1.0, 1.0) * 32767).astype(np.int16)


def read_wav(audio_data: bytes, dtype: str = "int16") -> np.ndarray:
    """Read WAV bytes back as an array."""
    samples, _ = sf.read(io.BytesIO(audio_data), dtype=dtype)
    return samples
