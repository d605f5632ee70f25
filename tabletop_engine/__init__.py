"""
Tabletop resolution engine.

This package contains the deterministic rules core of a tabletop role-playing
game: dice parsing and rolling, character data and progression, and
turn-based combat resolution.
"""

__version__ = "0.1.0"
