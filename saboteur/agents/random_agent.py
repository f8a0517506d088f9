"""
Random agent standing in for absent or automated players.
"""

import random
from typing import List, Optional

from .base_agent import BaseAgent
from ..core import Player, TargetNotEligibleError


class RandomAgent(BaseAgent):
    """Picks uniformly among the eligible players."""

    def __init__(self, rng: Optional[random.Random] = None):
        # Tests inject a seeded Random to make every choice reproducible
        self.random = rng or random.Random()

    def choose_target(self, candidates: List[Player]) -> Player:
        if not candidates:
            raise TargetNotEligibleError("There is nobody left to target.")
        return self.random.choice(candidates)
