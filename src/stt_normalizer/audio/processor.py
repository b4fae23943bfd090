"""Audio loading for the speech-recognition engine."""

from typing import Optional, Tuple

import numpy as np

from .converter import ConversionPlanner
from .decoder import decode
from .errors import DecodeError, FallbackError
from .formats import TARGET_FORMAT
from ..utils.logging import get_logger

logger = get_logger(__name__)


class AudioProcessor:
    """Turn arbitrary audio bytes into engine-ready sample arrays."""

    def __init__(self, planner: Optional[ConversionPlanner] = None):
        self.planner = planner or ConversionPlanner()

    def load_audio(self, audio_data: bytes) -> Tuple[np.ndarray, int]:
        """Load audio from bytes as normalized mono float32 at 16kHz.

        Args:
            audio_data: Audio container bytes of any supported type

        Returns:
            Tuple of (audio_array, sample_rate)

        Raises:
            FallbackError: If the audio cannot be converted or read back
        """
        result = self.planner.run(audio_data)
        logger.info(
            "Audio prepared for recognition",
            extra={"route": result.route.value, "bytes": len(result.audio)}
        )

        try:
            buffer = decode(result.audio, TARGET_FORMAT)
        except DecodeError as e:
            raise FallbackError(f"Converted audio could not be read: {e}") from e

        return buffer.samples, buffer.sample_rate

    @staticmethod
    def get_audio_duration(audio: np.ndarray, sample_rate: int) -> float:
        """Get audio duration in seconds.

        Args:
            audio: Audio array
            sample_rate: Sample rate in Hz

        Returns:
            Duration in seconds
        """
        return len(audio) / sample_rate
