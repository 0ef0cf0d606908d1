"""
Configuration management for tapecut.

Loads render and tool settings from a TOML file and validates them against
fixed bounds. Missing sections and parameters fall back to defaults.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional
import toml
import logging

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when config validation fails."""
    pass


class Config:
    """Configuration loader and validator."""

    # None means the parameter is not range-checked
    PARAM_BOUNDS = {
        "render": {
            "batch_size": (1, 1000),
            "intermediate_format": None,
            "scratch_root": None,
        },
        "tools": {
            "mixer": None,
            "transcoder": None,
        },
        "silence": {
            "base_unit_seconds": (0.001, 1.0),
        },
    }

    DEFAULT_CONFIG = {
        "config_version": "1.0",
        "render": {
            # ecasound refuses more chains than this in one invocation
            "batch_size": 80,
            "intermediate_format": "wav",
            "scratch_root": "",
        },
        "tools": {
            "mixer": "ecasound",
            "transcoder": "ffmpeg",
        },
        "silence": {
            "base_unit_seconds": 1.0,
        },
    }

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """Initialize config from dictionary (defaults when omitted)."""
        if config_dict is None:
            config_dict = copy.deepcopy(self.DEFAULT_CONFIG)
        self.data = config_dict
        self._validate()

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load config from TOML file.

        Args:
            config_path: Path to tapecut.toml. If None, uses TAPECUT_CONFIG_PATH env var
                        or defaults to configs/tapecut.toml.

        Returns:
            Config instance.

        Raises:
            ConfigError: If config is invalid or unreadable.
        """
        if config_path is None:
            config_path = os.getenv("TAPECUT_CONFIG_PATH", "configs/tapecut.toml")

        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return cls(copy.deepcopy(cls.DEFAULT_CONFIG))

        try:
            config_dict = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

        logger.info(f"Loaded config from {config_path}")
        return cls(config_dict)

    def _validate(self) -> None:
        """
        Fill in defaults and check numeric parameters against PARAM_BOUNDS.

        Raises:
            ConfigError: If any parameter is out of bounds or has the wrong type.
        """
        for section, params in self.PARAM_BOUNDS.items():
            if section not in self.data:
                logger.debug(f"Missing config section: {section}. Using defaults.")
                self.data[section] = copy.deepcopy(self.DEFAULT_CONFIG.get(section, {}))
                continue

            section_data = self.data[section]

            for param, bounds in params.items():
                if param not in section_data:
                    default_val = self.DEFAULT_CONFIG.get(section, {}).get(param)
                    logger.warning(f"Missing param {section}.{param}. Using default: {default_val}")
                    section_data[param] = default_val
                    continue

                value = section_data[param]

                if bounds is None:
                    if not isinstance(value, str):
                        raise ConfigError(
                            f"Parameter {section}.{param}={value!r} must be a string"
                        )
                    continue

                min_val, max_val = bounds
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value!r} must be a number"
                    )
                if not (min_val <= value <= max_val):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value} out of bounds "
                        f"[{min_val}, {max_val}]"
                    )

        if not isinstance(self.data["render"]["batch_size"], int):
            raise ConfigError("Parameter render.batch_size must be an integer")

        logger.debug("Config validation passed")

    def get(self, section: str, param: str, default: Any = None) -> Any:
        """Get a config parameter safely."""
        return self.data.get(section, {}).get(param, default)

    def __getitem__(self, section: str) -> Dict[str, Any]:
        """Allow dict-like access: config["render"]"""
        return self.data.get(section, {})

    def __repr__(self) -> str:
        version = self.data.get('config_version', 'unknown')
        return f"Config(version={version})"
