"""
Pytest fixtures for Five & Slide tests.
"""

import pytest
from typing import Callable

from ..engine_core.state import (
    BOARD_SIZE,
    Difficulty,
    GameState,
    PlayerInfo,
    PlayerKind,
    Token,
    create_initial_state,
)


RED = "RED"
BLUE = "BLUE"
GREEN = "GREEN"


def stack(*owners: str) -> tuple[Token, ...]:
    """Build a stack bottom-to-top from owner ids."""
    return tuple(Token(owner) for owner in owners)


def full(owner: str) -> tuple[Token, ...]:
    """A full stack of five tokens."""
    return stack(*[owner] * 5)


@pytest.fixture
def two_players() -> list[PlayerInfo]:
    return [
        PlayerInfo(player_id=RED, name="Red", color="#f87171"),
        PlayerInfo(player_id=BLUE, name="Blue", color="#60a5fa"),
    ]


@pytest.fixture
def human_vs_bot() -> list[PlayerInfo]:
    return [
        PlayerInfo(player_id=RED, name="Red", color="#f87171"),
        PlayerInfo(
            player_id=BLUE,
            name="Blue Bot",
            color="#60a5fa",
            kind=PlayerKind.BOT,
            difficulty=Difficulty.MEDIUM,
        ),
    ]


@pytest.fixture
def make_state(two_players) -> Callable[..., GameState]:
    """
    Factory for hand-built positions.

    spaces maps board index -> stack; unspecified spaces are empty.
    """

    def _make(
        spaces: dict[int, tuple[Token, ...]] | None = None,
        unplaced: dict[str, int] | None = None,
        exited: dict[str, int] | None = None,
        current_index: int = 0,
        players: list[PlayerInfo] | None = None,
        winner: str | None = None,
    ) -> GameState:
        base = create_initial_state(players or two_players)
        board = [()] * BOARD_SIZE
        for idx, tokens in (spaces or {}).items():
            board[idx] = tokens
        return base._copy_with(
            board=tuple(board),
            unplaced=unplaced if unplaced is not None else base.unplaced,
            exited=exited if exited is not None else base.exited,
            current_index=current_index,
            winner=winner,
        )

    return _make


@pytest.fixture
def opening_state(two_players) -> GameState:
    """Fresh two-player game."""
    return create_initial_state(two_players)
