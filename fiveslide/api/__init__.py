"""
API Module - Wire schemas for collaborators.

The engine has no transport of its own; relays and UIs use these pydantic
models to exchange snapshots and actions.
"""

from .schemas import (
    ActionResultSchema,
    ActionSchema,
    BubbleSchema,
    ErrorCode,
    GameStateSchema,
    MoveSchema,
    PlaceSchema,
    PlayerInfoSchema,
    action_to_dict,
    parse_action,
)

__all__ = [
    "ActionResultSchema",
    "ActionSchema",
    "BubbleSchema",
    "ErrorCode",
    "GameStateSchema",
    "MoveSchema",
    "PlaceSchema",
    "PlayerInfoSchema",
    "action_to_dict",
    "parse_action",
]
