"""
Target selection interface shared by human and automated actors.
"""

from abc import ABC, abstractmethod
from typing import List

from ..core import Player, TargetNotEligibleError


class BaseAgent(ABC):
    """
    Abstract base class for target selection.

    Night actions and automated votes resolve through one code path; the
    agent only decides which eligible player is targeted.
    """

    @abstractmethod
    def choose_target(self, candidates: List[Player]) -> Player:
        """
        Pick a target.

        Args:
            candidates: Eligible players, never empty

        Returns:
            The chosen player

        Raises:
            TargetNotEligibleError: If the agent insists on an ineligible target
        """
        pass


class ExplicitTarget(BaseAgent):
    """Target chosen by a human player."""

    def __init__(self, target_id: int):
        self.target_id = target_id

    def choose_target(self, candidates: List[Player]) -> Player:
        for player in candidates:
            if player.player_id == self.target_id:
                return player
        raise TargetNotEligibleError(f"Player {self.target_id} cannot be targeted.")
