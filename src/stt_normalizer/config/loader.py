"""Configuration loader with TOML support and environment variable overrides."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .settings import ConverterConfig, Settings


class ConfigLoader:
    """Load configuration from TOML files with environment variable overrides."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to TOML configuration file
        """
        self.config_path = config_path or self._get_default_config_path()

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path."""
        config_env = os.getenv("STT_NORMALIZER_CONFIG_FILE")
        if config_env:
            return Path(config_env)

        config_locations = [
            Path("config.toml"),
            Path("/etc/stt-normalizer/config.toml"),
            Path.home() / ".config" / "stt-normalizer" / "config.toml",
        ]

        for path in config_locations:
            if path.exists():
                return path

        return Path("config.toml")

    def load_toml(self) -> Dict[str, Any]:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return {}

        with open(self.config_path, "rb") as f:
            return tomllib.load(f)

    def load(self) -> Settings:
        """Load complete configuration with all overrides applied.

        Environment variables win over TOML values for top-level keys;
        nested sections are resolved by their own settings class.
        """
        config = self.load_toml()

        converter = config.pop("converter", None)
        if converter is not None:
            # Explicit init kwargs beat the environment in pydantic-settings,
            # so only pass TOML keys the environment does not override
            converter = {
                key: value for key, value in converter.items()
                if f"STT_NORMALIZER_CONVERTER_{key.upper()}" not in os.environ
            }
            config["converter"] = ConverterConfig(**converter)

        config = {
            key: value for key, value in config.items()
            if key == "converter" or f"STT_NORMALIZER_{key.upper()}" not in os.environ
        }
        return Settings(**config)


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load configuration from TOML file and environment variables.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Loaded configuration settings
    """
    loader = ConfigLoader(config_path)
    return loader.load()
