"""Output format validation."""

from .errors import ConversionError
from .formats import TARGET_FORMAT, AudioFormatDescriptor, detect
from ..utils.logging import get_logger

logger = get_logger(__name__)


class AudioValidationError(ConversionError):
    """Raised when audio is not in the required format."""
    pass


class AudioValidator:
    """Validate audio against the speech-recognition input format."""

    REQUIRED_SAMPLE_RATE = TARGET_FORMAT.sample_rate
    REQUIRED_CHANNELS = TARGET_FORMAT.channel_count
    REQUIRED_BITS_PER_SAMPLE = TARGET_FORMAT.bits_per_sample

    @classmethod
    def validate_target(cls, audio_data: bytes) -> AudioFormatDescriptor:
        """Validate that bytes hold a 16kHz mono 16-bit PCM WAV file.

        Args:
            audio_data: Raw audio file bytes

        Returns:
            Detected format

        Raises:
            AudioValidationError: If validation fails
        """
        audio_format = detect(audio_data)
        if audio_format is None:
            raise AudioValidationError("Audio is not a readable WAV file")

        if audio_format.channel_count != cls.REQUIRED_CHANNELS:
            raise AudioValidationError(
                f"Audio must be mono (1 channel), got {audio_format.channel_count} channels"
            )

        if audio_format.sample_rate != cls.REQUIRED_SAMPLE_RATE:
            raise AudioValidationError(
                f"Audio must be {cls.REQUIRED_SAMPLE_RATE}Hz, got {audio_format.sample_rate}Hz"
            )

        if audio_format != TARGET_FORMAT:
            raise AudioValidationError(
                f"Audio must be {cls.REQUIRED_BITS_PER_SAMPLE}-bit PCM integer, "
                f"got {audio_format.describe()}"
            )

        logger.debug("Validated audio", extra={"audio_format": audio_format.describe()})
        return audio_format

    @classmethod
    def is_target_format(cls, audio_data: bytes) -> bool:
        """Check whether bytes are already in the required format."""
        return detect(audio_data) == TARGET_FORMAT
