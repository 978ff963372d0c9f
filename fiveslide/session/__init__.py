"""
Session Module - Hosts matches in-process.

A session represents one match:
- Created when a game starts
- Holds the current game state
- Gates human and bot actions through the engine
- Destroyed when the game ends

Sessions are in-memory only; many can run side by side.
"""

from .manager import SessionManager, Session, SessionState, PendingBotTurn

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "PendingBotTurn",
]
