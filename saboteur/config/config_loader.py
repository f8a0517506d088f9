"""
YAML configuration loading with validation of room bounds.
"""

import yaml
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from .game_config import GameConfig, default_config
from ..core.roles import MIN_PLAYERS, MAX_PLAYERS


def _validate(config: GameConfig) -> GameConfig:
    """
    Reject room bounds no role table can serve.

    Raises:
        ValueError: If the bounds are out of order or unsupported
    """
    if not MIN_PLAYERS <= config.min_room_players <= config.max_room_players <= MAX_PLAYERS:
        raise ValueError(
            f"Room bounds {config.min_room_players}-{config.max_room_players} "
            f"must lie within {MIN_PLAYERS}-{MAX_PLAYERS}"
        )
    if not config.min_room_players <= config.default_max_players <= config.max_room_players:
        raise ValueError(f"default_max_players {config.default_max_players} is outside the room bounds")
    if config.max_rounds < 1:
        raise ValueError("max_rounds must be positive")
    return config


def config_from_dict(values: Dict[str, Any]) -> GameConfig:
    """Build a GameConfig from a mapping, warning about keys it does not know."""
    known = {f.name for f in fields(GameConfig)}
    accepted = {}
    for key, value in values.items():
        if key in known:
            accepted[key] = value
        else:
            # Unknown keys are ignored so older files keep loading
            print(f"Warning: Unknown config key '{key}' in YAML file")
    return _validate(GameConfig(**accepted))


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load game configuration from a YAML file. An empty file gives the defaults.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If the file holds something other than a mapping, or invalid bounds
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        values = yaml.safe_load(f)

    if values is None:
        return GameConfig()
    if not isinstance(values, dict):
        raise ValueError(f"Config file {config_path} must hold a mapping")
    return config_from_dict(values)


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """Load configuration from a YAML file, or the default config when no path is given."""
    if config_path is None:
        return default_config
    return load_config_from_yaml(config_path)
