"""
Target selection strategies for human and automated players.
"""

from .base_agent import BaseAgent, ExplicitTarget
from .random_agent import RandomAgent

__all__ = ['BaseAgent', 'ExplicitTarget', 'RandomAgent']
