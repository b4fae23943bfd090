"""Channel downmixing."""

import numpy as np


def mix(interleaved: np.ndarray, channel_count: int) -> np.ndarray:
    """Mix interleaved multi-channel audio to mono by averaging channels.

    A trailing incomplete frame is dropped, so the result holds
    ``len(interleaved) // channel_count`` samples.

    Args:
        interleaved: Interleaved float samples
        channel_count: Number of interleaved channels

    Returns:
        Mono float32 samples
    """
    if channel_count < 1:
        raise ValueError(f"channel_count must be at least 1, got {channel_count}")

    samples = np.asarray(interleaved, dtype=np.float32)
    if channel_count == 1:
        return samples

    frame_count = len(samples) // channel_count
    frames = samples[:frame_count * channel_count].reshape(frame_count, channel_count)
    return frames.mean(axis=1, dtype=np.float64).astype(np.float32)
