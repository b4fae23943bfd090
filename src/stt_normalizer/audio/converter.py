"""Conversion planning: passthrough, native conversion or FFmpeg fallback.

The native path is tried first. Every native error kind is caught at a
single boundary and turned into a ``FallbackRequested`` signal, after which
the original bytes go to FFmpeg. Only :class:`FallbackError` reaches callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .decoder import decode
from .encoder import encode
from .errors import FallbackError, NativeConversionError
from .fallback import ExternalFallbackConverter
from .formats import TARGET_FORMAT, AudioFormatDescriptor, ConversionPlan, detect
from .mixer import mix
from .resampler import resample
from .validator import AudioValidationError, AudioValidator
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ConversionRoute(str, Enum):
    """Which tier produced the output."""

    PASSTHROUGH = "passthrough"
    NATIVE = "native"
    FALLBACK = "fallback"


class ConversionState(str, Enum):
    """State of the native conversion tier."""

    NOT_ATTEMPTED = "not_attempted"
    NATIVE_FAILED = "native_failed"
    DONE = "done"


class FallbackReason(str, Enum):
    """Why the FFmpeg fallback was used."""

    DETECTION_MISS = "detection_miss"
    NATIVE_FAILED = "native_failed"
    NATIVE_DISABLED = "native_disabled"


@dataclass(frozen=True)
class FallbackRequested:
    """Signal from the native stage that FFmpeg must take over."""

    reason: FallbackReason
    error: Optional[NativeConversionError] = None


@dataclass
class ConversionResult:
    """Converted audio and the route taken to produce it."""

    audio: bytes
    route: ConversionRoute
    native_state: ConversionState
    input_format: Optional[AudioFormatDescriptor] = None
    fallback_reason: Optional[FallbackReason] = None
    native_error: Optional[str] = None


NativeOutcome = Union[bytes, FallbackRequested]


class ConversionPlanner:
    """Convert audio to 16kHz mono 16-bit PCM WAV."""

    def __init__(
        self,
        fallback: Optional[ExternalFallbackConverter] = None,
        native_enabled: bool = True,
        verify_output: bool = True
    ):
        """Initialize planner.

        Args:
            fallback: FFmpeg converter used when the native path cannot help
            native_enabled: Whether to try in-process conversion at all
            verify_output: Whether to check FFmpeg output against the target format
        """
        self.fallback = fallback or ExternalFallbackConverter()
        self.native_enabled = native_enabled
        self.verify_output = verify_output

    @classmethod
    def from_settings(cls, settings) -> "ConversionPlanner":
        """Build a planner from application settings."""
        converter = settings.converter
        return cls(
            fallback=ExternalFallbackConverter(
                ffmpeg_binary=converter.ffmpeg_binary,
                temp_dir=converter.temp_dir
            ),
            native_enabled=converter.native_enabled,
            verify_output=converter.verify_output,
        )

    def convert(self, audio_data: bytes) -> bytes:
        """Convert audio bytes, returning the converted container.

        Raises:
            FallbackError: If both the native path and FFmpeg fail
        """
        return self.run(audio_data).audio

    def run(self, audio_data: bytes) -> ConversionResult:
        """Convert audio bytes and report how the conversion was done.

        Raises:
            FallbackError: If both the native path and FFmpeg fail
        """
        input_format = detect(audio_data)

        if input_format is None:
            logger.debug("Input is not a WAV file or has unsupported encoding, using FFmpeg")
            outcome: NativeOutcome = FallbackRequested(FallbackReason.DETECTION_MISS)
        else:
            logger.debug(f"Input audio format: {input_format.describe()}")

            if input_format == TARGET_FORMAT:
                logger.debug("Audio already in Whisper-compatible format, skipping conversion")
                return ConversionResult(
                    audio=audio_data,
                    route=ConversionRoute.PASSTHROUGH,
                    native_state=ConversionState.NOT_ATTEMPTED,
                    input_format=input_format,
                )

            if self.native_enabled:
                outcome = self._attempt_native(audio_data, input_format)
            else:
                outcome = FallbackRequested(FallbackReason.NATIVE_DISABLED)

        if isinstance(outcome, bytes):
            return ConversionResult(
                audio=outcome,
                route=ConversionRoute.NATIVE,
                native_state=ConversionState.DONE,
                input_format=input_format,
            )

        native_state = ConversionState.NOT_ATTEMPTED
        if outcome.reason is FallbackReason.NATIVE_FAILED:
            native_state = ConversionState.NATIVE_FAILED
            logger.warning(f"Native conversion failed, falling back to FFmpeg: {outcome.error}")

        return ConversionResult(
            audio=self._run_fallback(audio_data),
            route=ConversionRoute.FALLBACK,
            native_state=native_state,
            input_format=input_format,
            fallback_reason=outcome.reason,
            native_error=str(outcome.error) if outcome.error else None,
        )

    def _attempt_native(self, audio_data: bytes, input_format: AudioFormatDescriptor) -> NativeOutcome:
        try:
            converted = self._convert_native(audio_data, input_format)
        except NativeConversionError as e:
            return FallbackRequested(FallbackReason.NATIVE_FAILED, error=e)

        logger.debug("Successfully converted audio using native implementation")
        return converted

    def _convert_native(self, audio_data: bytes, input_format: AudioFormatDescriptor) -> bytes:
        plan = ConversionPlan.for_format(input_format)
        logger.debug(
            f"Conversion needed: resampling={plan.needs_resample}, "
            f"channel_mixing={plan.needs_mix}, bit_depth={plan.needs_requantize}"
        )

        buffer = decode(audio_data, input_format)

        if plan.needs_mix:
            logger.debug(f"Mixing {input_format.channel_count} channels to mono by averaging")
            samples = mix(buffer.samples, buffer.channel_count)
        else:
            samples = buffer.samples

        if plan.needs_resample:
            logger.debug(f"Resampling from {input_format.sample_rate}Hz to {TARGET_FORMAT.sample_rate}Hz")
            samples = resample(samples, input_format.sample_rate, TARGET_FORMAT.sample_rate)

        return encode(samples, TARGET_FORMAT.sample_rate, TARGET_FORMAT.channel_count)

    def _run_fallback(self, audio_data: bytes) -> bytes:
        converted = self.fallback.convert(audio_data)

        if self.verify_output:
            try:
                AudioValidator.validate_target(converted)
            except AudioValidationError as e:
                raise FallbackError(f"FFmpeg produced unexpected output: {e}") from e

        return converted


_default_planner = ConversionPlanner()


def convert_to_whisper_format(audio_data: bytes) -> bytes:
    """Convert audio to 16kHz mono 16-bit PCM WAV with default settings.

    Tries native conversion first, falls back to FFmpeg if needed.

    Raises:
        FallbackError: If conversion fails entirely
    """
    return _default_planner.convert(audio_data)
