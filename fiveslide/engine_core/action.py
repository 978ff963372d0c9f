"""
Action System - Actions, landings, resolutions and results.

Actions are a closed tagged union:
1. Move   - slide the top run of a stack one step forward or backward
2. Place  - put a reserve token on the computed placement space
3. Bubble - lift a pinned own token to the top of its stack

Actions are frozen dataclasses, so legality gating is plain structural
equality against the enumerated options.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .state import Board


class Direction(Enum):
    """Direction of a move along the board."""
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def delta(self) -> int:
        return 1 if self is Direction.FORWARD else -1


@dataclass(frozen=True)
class Move:
    """Move the top `count` same-owner tokens of `from_space`."""
    from_space: int
    direction: Direction
    count: int

    action_type = "move"


@dataclass(frozen=True)
class Place:
    """Place one reserve token."""

    action_type = "place"


@dataclass(frozen=True)
class Bubble:
    """Lift the pinned token at (space, token_index) to the top of its stack."""
    space: int
    token_index: int

    action_type = "bubble"


Action = Union[Move, Place, Bubble]


class LandingKind(Enum):
    """Where a moved block ends up."""
    SPACE = "space"
    EXIT = "exit"


@dataclass(frozen=True)
class Landing:
    """
    Where a move ends up.

    index is set for SPACE landings and None for EXIT.
    """
    kind: LandingKind
    index: int | None = None

    @classmethod
    def exit(cls) -> Landing:
        return cls(kind=LandingKind.EXIT)

    @classmethod
    def space(cls, index: int) -> Landing:
        return cls(kind=LandingKind.SPACE, index=index)

    @property
    def is_exit(self) -> bool:
        return self.kind is LandingKind.EXIT


@dataclass(frozen=True)
class MoveResolution:
    """
    Outcome of resolving a move against a board.

    placements lists (space, tokens deposited) in the order the block
    reached them.
    """
    board: Board
    placements: tuple[tuple[int, int], ...] = ()
    exited: int = 0

    @property
    def landing(self) -> Landing | None:
        if self.exited:
            return Landing.exit()
        if self.placements:
            return Landing.space(self.placements[0][0])
        return None


@dataclass
class ActionResult:
    """
    Result of applying an action through a gate (reducer or session).

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    # Human-readable changes, for UI/logs
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )


def describe_action(action: Action) -> str:
    """Short human-readable description of an action."""
    if isinstance(action, Move):
        return f"move {action.count} from space {action.from_space + 1} {action.direction.value}"
    if isinstance(action, Bubble):
        return f"bubble token {action.token_index} on space {action.space + 1}"
    return "place"
