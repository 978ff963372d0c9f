"""
Engine Core - Deterministic game state and rules.

The engine is the runtime that:
1. Creates the initial GameState
2. Generates legal actions
3. Resolves moves, including five-and-slide
4. Applies actions via the reducer
"""

from .state import (
    BOARD_SIZE,
    STACK_LIMIT,
    INITIAL_TOKENS,
    EXIT_TO_WIN,
    Difficulty,
    GameState,
    PlayerInfo,
    PlayerKind,
    Token,
    create_initial_state,
    next_player_index,
)
from .action import (
    Action,
    ActionResult,
    Bubble,
    Direction,
    Landing,
    LandingKind,
    Move,
    MoveResolution,
    Place,
)
from .rules import (
    can_place,
    count_pinned_opponents,
    is_pinned,
    lowest_empty_index,
    placement_destination,
    predict_landing,
    resolve_move,
    top_contiguous_count,
)
from .action_generator import bubble_options, is_legal, legal_actions, move_options
from .reducer import Reducer, apply_action

__all__ = [
    "BOARD_SIZE",
    "STACK_LIMIT",
    "INITIAL_TOKENS",
    "EXIT_TO_WIN",
    "Difficulty",
    "GameState",
    "PlayerInfo",
    "PlayerKind",
    "Token",
    "create_initial_state",
    "next_player_index",
    "Action",
    "ActionResult",
    "Bubble",
    "Direction",
    "Landing",
    "LandingKind",
    "Move",
    "MoveResolution",
    "Place",
    "can_place",
    "count_pinned_opponents",
    "is_pinned",
    "lowest_empty_index",
    "placement_destination",
    "predict_landing",
    "resolve_move",
    "top_contiguous_count",
    "bubble_options",
    "is_legal",
    "legal_actions",
    "move_options",
    "Reducer",
    "apply_action",
]
