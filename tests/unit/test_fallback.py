"""Unit tests for the FFmpeg fallback converter."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from stt_normalizer.audio.errors import FallbackError
from stt_normalizer.audio.fallback import ExternalFallbackConverter, scoped_temp_path
from helpers import make_wav, pcm16, sine

OUTPUT_WAV = make_wav(pcm16(sine(440, 16000, 1600, amplitude=0.5)), 16000)


def _fake_ffmpeg(output=OUTPUT_WAV, seen=None):
    """Build a subprocess.run stand-in that writes ``output`` to the last argument."""
    def run(cmd, **kwargs):
        if seen is not None:
            seen.append({"cmd": cmd, "input": Path(cmd[2]).read_bytes(), "kwargs": kwargs})
        Path(cmd[-1]).write_bytes(output)
        return subprocess.CompletedProcess(cmd, 0, stdout=b"", stderr=b"")
    return run


class TestBuildCommand:
    """Test the FFmpeg argument set."""

    def test_fixed_arguments(self):
        """Test that the command forces 16kHz mono s16le with overwrite."""
        converter = ExternalFallbackConverter(ffmpeg_binary="/opt/ffmpeg")
        cmd = converter.build_command(Path("/tmp/in.audio"), Path("/tmp/out.wav"))

        assert cmd == [
            "/opt/ffmpeg",
            "-i", "/tmp/in.audio",
            "-ar", "16000",
            "-ac", "1",
            "-c:a", "pcm_s16le",
            "-y",
            "/tmp/out.wav",
        ]


class TestConvert:
    """Test ExternalFallbackConverter.convert()."""

    def test_success_returns_output_bytes(self, tmp_path):
        """Test that the converted file's bytes are returned."""
        seen = []
        converter = ExternalFallbackConverter(temp_dir=tmp_path)

        with patch("stt_normalizer.audio.fallback.subprocess.run", side_effect=_fake_ffmpeg(seen=seen)):
            result = converter.convert(b"input audio bytes")

        assert result == OUTPUT_WAV
        assert seen[0]["input"] == b"input audio bytes"
        assert seen[0]["kwargs"]["check"] is True
        assert seen[0]["kwargs"]["capture_output"] is True

    def test_temp_files_removed_on_success(self, tmp_path):
        """Test that no temporary files outlive the call."""
        converter = ExternalFallbackConverter(temp_dir=tmp_path)

        with patch("stt_normalizer.audio.fallback.subprocess.run", side_effect=_fake_ffmpeg()):
            converter.convert(b"data")

        assert list(tmp_path.iterdir()) == []

    def test_nonzero_exit(self, tmp_path):
        """Test that a failing FFmpeg raises FallbackError with its stderr."""
        converter = ExternalFallbackConverter(temp_dir=tmp_path)
        error = subprocess.CalledProcessError(1, ["ffmpeg"], output=b"", stderr=b"Invalid data found")

        with patch("stt_normalizer.audio.fallback.subprocess.run", side_effect=error):
            with pytest.raises(FallbackError) as exc_info:
                converter.convert(b"data")

        assert exc_info.value.stderr == "Invalid data found"
        assert exc_info.value.returncode == 1
        assert "Invalid data found" in str(exc_info.value)
        assert list(tmp_path.iterdir()) == []

    def test_spawn_failure(self, tmp_path):
        """Test that a missing binary raises FallbackError."""
        converter = ExternalFallbackConverter(
            ffmpeg_binary=str(tmp_path / "no-such-ffmpeg"),
            temp_dir=tmp_path
        )

        with pytest.raises(FallbackError, match="Failed to run ffmpeg"):
            converter.convert(b"data")

        assert list(tmp_path.iterdir()) == []

    def test_unreadable_output(self, tmp_path):
        """Test that a vanished output file raises FallbackError."""
        def run(cmd, **kwargs):
            Path(cmd[-1]).unlink()
            return subprocess.CompletedProcess(cmd, 0)

        converter = ExternalFallbackConverter(temp_dir=tmp_path)
        with patch("stt_normalizer.audio.fallback.subprocess.run", side_effect=run):
            with pytest.raises(FallbackError, match="Failed to read converted audio"):
                converter.convert(b"data")

        assert list(tmp_path.iterdir()) == []

    def test_unique_temp_names(self, tmp_path):
        """Test that each call uses fresh temporary paths."""
        seen = []
        converter = ExternalFallbackConverter(temp_dir=tmp_path)

        with patch("stt_normalizer.audio.fallback.subprocess.run", side_effect=_fake_ffmpeg(seen=seen)):
            converter.convert(b"one")
            converter.convert(b"two")

        assert seen[0]["cmd"][2] != seen[1]["cmd"][2]
        assert seen[0]["cmd"][-1] != seen[1]["cmd"][-1]


class TestScopedTempPath:
    """Test scoped_temp_path()."""

    def test_removed_after_exception(self, tmp_path):
        """Test that the file is removed when the block raises."""
        with pytest.raises(RuntimeError):
            with scoped_temp_path(".wav", tmp_path) as path:
                path.write_bytes(b"x")
                raise RuntimeError("boom")

        assert not path.exists()

    def test_missing_directory(self, tmp_path):
        """Test that an unusable temp directory raises FallbackError."""
        with pytest.raises(FallbackError, match="temp file"):
            with scoped_temp_path(".wav", tmp_path / "missing"):
                pass


class TestCheckInstalled:
    """Test check_installed()."""

    def test_installed(self):
        """Test that a zero exit code means installed."""
        completed = subprocess.CompletedProcess(["ffmpeg", "-version"], 0)
        with patch("stt_normalizer.audio.fallback.subprocess.run", return_value=completed) as run:
            assert ExternalFallbackConverter().check_installed() is True
        assert run.call_args[0][0] == ["ffmpeg", "-version"]

    def test_not_installed(self, tmp_path):
        """Test that a missing binary reports False."""
        converter = ExternalFallbackConverter(ffmpeg_binary=str(tmp_path / "nope"))
        assert converter.check_installed() is False
