"""Chunked FFT sample-rate conversion."""

import math

import numpy as np
from scipy.signal import firwin

from .errors import ResampleError
from ..utils.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024

# Fraction of the lower Nyquist frequency kept by the anti-aliasing filter
CUTOFF_RATIO = 0.95


class FftResampler:
    """Overlap-add FFT resampler for a single channel.

    Incoming chunks are buffered into FFT blocks whose length is a whole
    multiple of ``from_rate / gcd``, so every block maps to an integer number
    of output frames. Each block is low-pass filtered and rate-converted in
    the frequency domain; the convolution tail is carried into the next
    block and released by :meth:`flush`.
    """

    def __init__(
        self,
        from_rate: int,
        to_rate: int,
        chunk_size: int = CHUNK_SIZE,
        channels: int = 1
    ):
        """Initialize resampler.

        Args:
            from_rate: Input sample rate in Hz
            to_rate: Output sample rate in Hz
            chunk_size: Frames per call to :meth:`process`
            channels: Channel count (only mono is supported)

        Raises:
            ResampleError: If the configuration is invalid
        """
        if from_rate <= 0 or to_rate <= 0:
            raise ResampleError(f"Invalid rate pair: {from_rate}Hz -> {to_rate}Hz")
        if chunk_size <= 0:
            raise ResampleError(f"Chunk size must be positive, got {chunk_size}")
        if channels != 1:
            raise ResampleError(f"Only mono resampling is supported, got {channels} channels")

        self.from_rate = int(from_rate)
        self.to_rate = int(to_rate)
        self.chunk_size = int(chunk_size)

        divisor = math.gcd(self.from_rate, self.to_rate)
        unit_in = self.from_rate // divisor
        unit_out = self.to_rate // divisor

        units = max(1, math.ceil(self.chunk_size / unit_in))
        half_units = max(1, units // 2)

        self.block_in = units * unit_in
        self.block_out = units * unit_out
        # Filter half-length in input frames, and the delay it causes in output frames
        self._half_taps = half_units * unit_in
        self.output_delay = half_units * unit_out

        self._fft_len_in = self.block_in + 2 * self._half_taps
        self._fft_len_out = self.block_out + 2 * self.output_delay
        self._bins_out = self._fft_len_out // 2 + 1
        self._scale = self._fft_len_out / self._fft_len_in

        cutoff = CUTOFF_RATIO * min(self.from_rate, self.to_rate) / 2
        try:
            taps = firwin(
                2 * self._half_taps + 1,
                cutoff,
                window="blackmanharris",
                fs=self.from_rate
            )
        except ValueError as e:
            raise ResampleError(f"Failed to create resampler: {e}") from e

        self._filter = np.fft.rfft(taps, n=self._fft_len_in)
        self._pending = np.zeros(0, dtype=np.float64)
        self._overlap = np.zeros(self._fft_len_out - self.block_out, dtype=np.float64)

    def process(self, chunk: np.ndarray) -> np.ndarray:
        """Resample one chunk of exactly ``chunk_size`` frames.

        May return fewer frames than the chunk corresponds to (or none) while
        input is buffered towards a full FFT block.
        """
        chunk = np.asarray(chunk, dtype=np.float64)
        if chunk.ndim != 1 or len(chunk) != self.chunk_size:
            raise ResampleError(
                f"Expected a mono chunk of {self.chunk_size} frames, got shape {chunk.shape}"
            )

        self._pending = np.concatenate([self._pending, chunk])
        output = []
        while len(self._pending) >= self.block_in:
            output.append(self._process_block(self._pending[:self.block_in]))
            self._pending = self._pending[self.block_in:]

        if not output:
            return np.zeros(0, dtype=np.float32)
        return np.concatenate(output).astype(np.float32)

    def flush(self) -> np.ndarray:
        """Drain buffered input and the filter tail."""
        output = []
        if len(self._pending):
            block = np.zeros(self.block_in, dtype=np.float64)
            block[:len(self._pending)] = self._pending
            output.append(self._process_block(block))
            self._pending = np.zeros(0, dtype=np.float64)

        output.append(self._overlap)
        self._overlap = np.zeros_like(self._overlap)
        return np.concatenate(output).astype(np.float32)

    def _process_block(self, block: np.ndarray) -> np.ndarray:
        spectrum = np.fft.rfft(block, n=self._fft_len_in) * self._filter

        resized = np.zeros(self._bins_out, dtype=np.complex128)
        shared = min(len(spectrum), self._bins_out)
        resized[:shared] = spectrum[:shared]

        wave = np.fft.irfft(resized, n=self._fft_len_out) * self._scale
        if not np.all(np.isfinite(wave)):
            raise ResampleError("Resampling produced non-finite samples")

        wave[:len(self._overlap)] += self._overlap
        self._overlap = wave[self.block_out:].copy()
        return wave[:self.block_out]


def resample(
    samples: np.ndarray,
    from_rate: int,
    to_rate: int,
    chunk_size: int = CHUNK_SIZE
) -> np.ndarray:
    """Resample mono audio.

    The input is fed through :class:`FftResampler` in fixed ``chunk_size``
    chunks, the last one zero-padded, and the resampler is drained at the
    end. The filter delay is removed and the result is cut to
    ``round(len(samples) * to_rate / from_rate)`` frames.

    Raises:
        ResampleError: If the resampler cannot be built or a chunk fails
    """
    if from_rate == to_rate:
        return samples

    samples = np.asarray(samples, dtype=np.float32)
    resampler = FftResampler(from_rate, to_rate, chunk_size=chunk_size, channels=1)

    pieces = []
    for start in range(0, len(samples), chunk_size):
        chunk = samples[start:start + chunk_size]
        if len(chunk) < chunk_size:
            chunk = np.pad(chunk, (0, chunk_size - len(chunk)))
        pieces.append(resampler.process(chunk))

    pieces.append(resampler.flush())
    output = np.concatenate(pieces)

    expected = int(round(len(samples) * to_rate / from_rate))
    start = resampler.output_delay
    resampled = output[start:start + expected]

    logger.debug(
        f"Resampled {len(samples)} samples to {len(resampled)} samples "
        f"(ratio: {to_rate / from_rate:.3f})"
    )
    return resampled
