"""
Configuration loader for YAML-based match configurations.
"""

import logging
from dataclasses import fields
from pathlib import Path
from typing import Optional

import yaml

from ..core.exceptions import ConfigurationError
from .game_config import GameConfig, default_config

logger = logging.getLogger(__name__)


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load match configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ConfigurationError: If the zone phase table is malformed
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return GameConfig()

    if not isinstance(config_dict, dict):
        raise ConfigurationError("<root>", f"Config file {config_path} must contain a mapping")

    # Create config from dict, using defaults for missing values
    config = GameConfig()
    known = {f.name for f in fields(GameConfig)}

    for key, value in config_dict.items():
        if key in known:
            setattr(config, key, value)
        else:
            # Warn about unknown keys but don't fail
            logger.warning("Unknown config key '%s' in %s", key, config_path)

    if config.phases is not None and not isinstance(config.phases, list):
        raise ConfigurationError("phases", "'phases' must be a list of phase mappings")

    # Fail at load time rather than at match creation
    config.build_phase_table()
    return config


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return default.

    Args:
        config_path: Optional path to YAML config file. If None, returns default config.

    Returns:
        GameConfig instance
    """
    if config_path is None:
        return default_config

    return load_config_from_yaml(config_path)
