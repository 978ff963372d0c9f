"""
Game State - Immutable snapshot of a Five & Slide match.

Design principles:
- Immutable: every transition returns a brand new state
- Serializable: plain values only, see api.schemas for the wire form
- Snapshots are shared freely between observers, never mutated
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence


BOARD_SIZE = 8
STACK_LIMIT = 5
INITIAL_TOKENS = 7
EXIT_TO_WIN = 5
MIN_PLAYERS = 1
MAX_PLAYERS = 8


class PlayerKind(Enum):
    """Who controls a seat."""
    HUMAN = "human"
    BOT = "bot"


class Difficulty(Enum):
    """Bot difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Token:
    """A token on the board. Only its owner matters."""
    player: str


Stack = tuple[Token, ...]
Board = tuple[Stack, ...]


@dataclass(frozen=True)
class PlayerInfo:
    """
    A seat at the table.

    difficulty is only meaningful for bots.
    """
    player_id: str
    name: str
    color: str = ""
    kind: PlayerKind = PlayerKind.HUMAN
    difficulty: Difficulty | None = None

    @property
    def is_bot(self) -> bool:
        return self.kind == PlayerKind.BOT


def empty_board() -> Board:
    return tuple(() for _ in range(BOARD_SIZE))


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    Stacks are stored bottom (index 0) to top (last index).
    All state changes go through the reducer, which returns a new instance.
    """
    board: Board = field(default_factory=empty_board)
    unplaced: Mapping[str, int] = field(default_factory=dict)
    exited: Mapping[str, int] = field(default_factory=dict)
    players: tuple[PlayerInfo, ...] = ()
    current_index: int = 0
    winner: str | None = None
    message: str | None = None

    @property
    def current_player(self) -> PlayerInfo:
        """Get the player whose turn it is."""
        return self.players[self.current_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> PlayerInfo | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def tokens_on_board(self, player_id: str) -> int:
        """Count a player's tokens across every stack."""
        return sum(
            1 for stack in self.board for token in stack if token.player == player_id
        )

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            board=kwargs.get("board", self.board),
            unplaced=kwargs.get("unplaced", self.unplaced),
            exited=kwargs.get("exited", self.exited),
            players=kwargs.get("players", self.players),
            current_index=kwargs.get("current_index", self.current_index),
            winner=kwargs.get("winner", self.winner),
            message=kwargs.get("message", self.message),
        )


def create_initial_state(players: Sequence[PlayerInfo]) -> GameState:
    """
    Create the opening state of a match.

    Every player starts with all tokens in reserve and an empty board.
    """
    players = tuple(players)
    if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
        raise ValueError(
            f"Five & Slide supports {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(players)}"
        )
    ids = [p.player_id for p in players]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Player ids must be unique: {ids}")

    return GameState(
        board=empty_board(),
        unplaced={pid: INITIAL_TOKENS for pid in ids},
        exited={pid: 0 for pid in ids},
        players=players,
        current_index=0,
        winner=None,
        message=None,
    )


def next_player_index(state: GameState) -> int:
    """Index of the player after the current one, cyclically."""
    return (state.current_index + 1) % len(state.players)
