"""
Saboteur: round engine for an office social-deduction party game.
"""

__version__ = "0.1.0"
