"""FFmpeg fallback for inputs the native path cannot convert."""

import os
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from .errors import FallbackError
from .formats import TARGET_FORMAT
from ..utils.logging import get_logger

logger = get_logger(__name__)

TEMP_PREFIX = "stt_normalizer_"


@contextmanager
def scoped_temp_path(suffix: str, directory: Optional[Path] = None) -> Iterator[Path]:
    """Yield a uniquely named temporary file path, removed on exit."""
    try:
        fd, name = tempfile.mkstemp(
            prefix=TEMP_PREFIX,
            suffix=suffix,
            dir=str(directory) if directory else None
        )
    except OSError as e:
        raise FallbackError(f"Failed to create temp file: {e}") from e
    os.close(fd)

    path = Path(name)
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove temp file {path}: {e}")


class ExternalFallbackConverter:
    """Convert audio by running FFmpeg in a subprocess."""

    def __init__(self, ffmpeg_binary: str = "ffmpeg", temp_dir: Optional[Path] = None):
        """Initialize fallback converter.

        Args:
            ffmpeg_binary: FFmpeg executable name or path
            temp_dir: Directory for temporary files (system default if None)
        """
        self.ffmpeg_binary = ffmpeg_binary
        self.temp_dir = temp_dir

    def build_command(self, input_path: Path, output_path: Path) -> List[str]:
        """Build the FFmpeg invocation for the target format."""
        return [
            self.ffmpeg_binary,
            "-i", str(input_path),
            "-ar", str(TARGET_FORMAT.sample_rate),
            "-ac", str(TARGET_FORMAT.channel_count),
            "-c:a", "pcm_s16le",
            "-y",
            str(output_path),
        ]

    def convert(self, audio_data: bytes) -> bytes:
        """Convert audio bytes to 16kHz mono 16-bit PCM WAV.

        Raises:
            FallbackError: If FFmpeg cannot be run, fails, or its output
                cannot be read
        """
        logger.info("Using FFmpeg for audio conversion")

        with scoped_temp_path(".audio", self.temp_dir) as input_path, \
                scoped_temp_path(".wav", self.temp_dir) as output_path:
            try:
                input_path.write_bytes(audio_data)
            except OSError as e:
                raise FallbackError(f"Failed to write audio data: {e}") from e

            cmd = self.build_command(input_path, output_path)
            logger.debug(f"Running ffmpeg: {' '.join(cmd)}")

            try:
                subprocess.run(cmd, capture_output=True, check=True)
            except subprocess.CalledProcessError as e:
                stderr = (e.stderr or b"").decode("utf-8", errors="replace")
                logger.error(f"FFmpeg exited with code {e.returncode}")
                raise FallbackError(
                    f"FFmpeg conversion failed: {stderr}",
                    stderr=stderr,
                    returncode=e.returncode
                ) from e
            except OSError as e:
                raise FallbackError(f"Failed to run ffmpeg: {e}") from e

            try:
                return output_path.read_bytes()
            except OSError as e:
                raise FallbackError(f"Failed to read converted audio: {e}") from e

    def check_installed(self) -> bool:
        """Check whether FFmpeg can be executed."""
        try:
            result = subprocess.run(
                [self.ffmpeg_binary, "-version"],
                capture_output=True
            )
        except OSError as e:
            logger.debug(f"FFmpeg not available: {e}")
            return False
        return result.returncode == 0
