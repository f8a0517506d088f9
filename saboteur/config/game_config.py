"""
Game configuration and constants.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for game parameters."""

    # Room settings
    min_room_players: int = 6  # Smallest max_players a host may choose
    max_room_players: int = 10
    default_max_players: int = 6
    ai_player_id_base: int = 900000  # Automated players get ids above this
    ai_nickname_prefix: str = "AI"

    # Game settings
    max_rounds: int = 20  # Safety limit for simulated games
    random_seed: Optional[int] = None  # Seed for reproducible shuffles and automated choices

    # Judge announcements
    use_judge_announcements: bool = True

    # Run recording
    record_runs: bool = True
    runs_dir: str = "runs"

    # Web server
    server_host: str = "127.0.0.1"
    server_port: int = 5000


# Default configuration instance
default_config = GameConfig()
