"""Shared pytest fixtures for STT normalizer tests."""

import shutil

import numpy as np
import pytest

from helpers import make_wav, pcm16, sine


@pytest.fixture
def target_wav():
    """One second of a 440Hz tone already at 16kHz mono 16-bit."""
    return make_wav(pcm16(sine(440, 16000, 16000, amplitude=0.5)), 16000)


@pytest.fixture
def wav_8k_mono():
    """8000 samples of 16-bit mono audio at 8kHz."""
    return make_wav(pcm16(sine(440, 8000, 8000, amplitude=0.5)), 8000)


@pytest.fixture
def wav_44k_stereo():
    """Half a second of 16-bit stereo audio at 44.1kHz."""
    left = sine(440, 44100, 22050, amplitude=0.5)
    right = sine(660, 44100, 22050, amplitude=0.25)
    return make_wav(pcm16(np.stack([left, right], axis=1)), 44100)


@pytest.fixture
def wav_8bit():
    """Unsigned 8-bit PCM, which the native path does not decode."""
    return make_wav(sine(440, 16000, 1600, amplitude=0.5), 16000, subtype="PCM_U8")


@pytest.fixture
def not_audio():
    """Bytes that no audio container parser accepts."""
    return b"definitely not an audio container" * 10


@pytest.fixture
def ffmpeg_available():
    """Skip the test when ffmpeg is not installed."""
    if shutil.which("ffmpeg") is None:
        pytest.skip("ffmpeg is not installed")
    return True


@pytest.fixture
def settings():
    """Settings with plain-text logging for tests."""
    from stt_normalizer.config.settings import ConverterConfig, Settings

    return Settings(
        environment="test",
        log_level="DEBUG",
        log_format="text",
        converter=ConverterConfig(ffmpeg_binary="ffmpeg")
    )
