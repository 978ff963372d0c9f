"""
Five & Slide - Deterministic board game engine.

A turn-based stacking game for 1-8 players. The package provides:
- Immutable game state snapshots
- Legal action generation
- Deterministic move resolution (including "five and slide")
- Heuristic bot opponents in three difficulty tiers
- An in-process session controller for hotseat play
"""

__version__ = "0.1.0"
