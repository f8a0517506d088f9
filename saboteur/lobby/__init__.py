"""
Lobby: rooms and rosters around the game.
"""

from .room_manager import RoomManager

__all__ = ['RoomManager']
