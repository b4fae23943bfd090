"""Command-line entry point for the STT normalizer."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .audio.converter import ConversionPlanner
from .audio.errors import FallbackError
from .config.loader import load_config
from .utils.logging import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="stt-normalize",
        description="Convert audio to 16kHz mono 16-bit PCM WAV for speech recognition."
    )
    parser.add_argument("input", type=Path, help="Input audio file")
    parser.add_argument("output", type=Path, help="Output WAV file")
    parser.add_argument("--config", type=Path, default=None, help="Path to TOML configuration file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for running a single conversion."""
    args = build_parser().parse_args(argv)

    settings = load_config(args.config)
    setup_logging(settings)
    logger = get_logger(__name__)

    try:
        audio_data = args.input.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read input file: {e}")
        return 1

    planner = ConversionPlanner.from_settings(settings)
    try:
        result = planner.run(audio_data)
    except FallbackError as e:
        logger.error("Audio conversion failed", extra={"input": str(args.input), "error": str(e)})
        return 1

    args.output.write_bytes(result.audio)
    logger.info(
        "Audio converted",
        extra={
            "input": str(args.input),
            "output": str(args.output),
            "route": result.route.value,
        }
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
