"""
Room record owned by the lobby.
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class Room:
    room_id: int
    title: str
    password: str = ""
    max_players: int = 6
    in_progress: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roomId": self.room_id,
            "title": self.title,
            "maxPlayer": self.max_players,
            "onPlay": self.in_progress,
            "isLocked": bool(self.password),
        }
