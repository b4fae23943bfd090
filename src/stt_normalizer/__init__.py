"""STT audio normalizer.

Converts arbitrary input audio into the 16 kHz mono 16-bit PCM WAV that
speech-recognition engines expect.
"""

__version__ = "0.1.0"
