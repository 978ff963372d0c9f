"""
Pydantic Schemas - Wire form of game snapshots and actions.

Collaborators (network relay, UI bridge) encode GameState snapshots with
GameStateSchema and decode inbound actions with parse_action(). Malformed
payloads fail here with pydantic.ValidationError and never reach the engine.

Error Codes:
- NO_GAME: Session has no game in progress
- GAME_OVER: Game already has a winner
- NOT_YOUR_TURN: Acting player is not the current player
- STALE_ACTION: Action was chosen against an older state version
- ILLEGAL_ACTION: Action is not in the current legal set
- VALIDATION_ERROR: Payload could not be parsed
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

from ..engine_core.action import Action, ActionResult, Bubble, Direction, Move, Place
from ..engine_core.state import (
    BOARD_SIZE,
    EXIT_TO_WIN,
    INITIAL_TOKENS,
    STACK_LIMIT,
    Difficulty,
    GameState,
    PlayerInfo,
    PlayerKind,
    Token,
)


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    NO_GAME = "NO_GAME"
    GAME_OVER = "GAME_OVER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    STALE_ACTION = "STALE_ACTION"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Actions
# =============================================================================

class MoveSchema(BaseModel):
    """Move the top `count` tokens of space `from_space`."""
    type: Literal["move"] = "move"
    from_space: int = Field(ge=0, lt=BOARD_SIZE, description="0-based space index")
    direction: Direction
    count: int = Field(ge=1, le=STACK_LIMIT)


class PlaceSchema(BaseModel):
    """Place a reserve token."""
    type: Literal["place"] = "place"


class BubbleSchema(BaseModel):
    """Bubble a pinned token to the top of its stack."""
    type: Literal["bubble"] = "bubble"
    space: int = Field(ge=0, lt=BOARD_SIZE)
    token_index: int = Field(ge=0, lt=STACK_LIMIT)


ActionSchema = Annotated[
    Union[MoveSchema, PlaceSchema, BubbleSchema],
    Field(discriminator="type"),
]

_action_adapter = TypeAdapter(ActionSchema)


def parse_action(data: dict) -> Action:
    """Decode a wire action into an engine action."""
    parsed = _action_adapter.validate_python(data)
    if isinstance(parsed, MoveSchema):
        return Move(from_space=parsed.from_space, direction=parsed.direction, count=parsed.count)
    if isinstance(parsed, BubbleSchema):
        return Bubble(space=parsed.space, token_index=parsed.token_index)
    return Place()


def action_to_dict(action: Action) -> dict:
    """Encode an engine action for the wire."""
    if isinstance(action, Move):
        schema = MoveSchema(
            from_space=action.from_space, direction=action.direction, count=action.count
        )
    elif isinstance(action, Bubble):
        schema = BubbleSchema(space=action.space, token_index=action.token_index)
    else:
        schema = PlaceSchema()
    return schema.model_dump(mode="json")


# =============================================================================
# State
# =============================================================================

class PlayerInfoSchema(BaseModel):
    """A seat at the table."""
    player_id: str = Field(min_length=1)
    name: str
    color: str = ""
    kind: PlayerKind = PlayerKind.HUMAN
    difficulty: Optional[Difficulty] = None

    model_config = {"from_attributes": True}

    def to_player(self) -> PlayerInfo:
        return PlayerInfo(
            player_id=self.player_id,
            name=self.name,
            color=self.color,
            kind=self.kind,
            difficulty=self.difficulty,
        )


class GameStateSchema(BaseModel):
    """
    Snapshot of a match.

    board lists each space bottom-to-top as owner ids. A snapshot only
    validates when every token belongs to a listed player, each player
    accounts for all of its tokens and the winner matches the exit counts.
    """
    board: list[list[str]] = Field(min_length=BOARD_SIZE, max_length=BOARD_SIZE)
    unplaced: dict[str, int]
    exited: dict[str, int]
    players: list[PlayerInfoSchema] = Field(min_length=1)
    current_index: int = Field(0, ge=0)
    winner: Optional[str] = None
    message: Optional[str] = None

    @field_validator("board")
    @classmethod
    def _stacks_within_limit(cls, board: list[list[str]]) -> list[list[str]]:
        for idx, stack in enumerate(board):
            if len(stack) > STACK_LIMIT:
                raise ValueError(f"space {idx + 1} holds {len(stack)} tokens (max {STACK_LIMIT})")
        return board

    @field_validator("current_index")
    @classmethod
    def _index_in_range(cls, value: int, info) -> int:
        players = info.data.get("players")
        if players is not None and value >= len(players):
            raise ValueError(f"current_index {value} out of range for {len(players)} player(s)")
        return value

    @model_validator(mode="after")
    def _consistent_with_players(self) -> "GameStateSchema":
        ids = [p.player_id for p in self.players]
        id_set = set(ids)
        if len(id_set) != len(ids):
            raise ValueError(f"player ids must be unique: {ids}")
        if set(self.unplaced) != id_set:
            raise ValueError(f"unplaced must be keyed by exactly the player ids {sorted(id_set)}")
        if set(self.exited) != id_set:
            raise ValueError(f"exited must be keyed by exactly the player ids {sorted(id_set)}")

        on_board = dict.fromkeys(ids, 0)
        for idx, stack in enumerate(self.board):
            for owner in stack:
                if owner not in on_board:
                    raise ValueError(f"space {idx + 1} holds a token of unknown player {owner!r}")
                on_board[owner] += 1

        for pid in ids:
            if self.unplaced[pid] < 0 or self.exited[pid] < 0:
                raise ValueError(f"{pid} has a negative token count")
            total = self.unplaced[pid] + self.exited[pid] + on_board[pid]
            if total != INITIAL_TOKENS:
                raise ValueError(f"{pid} accounts for {total} tokens, expected {INITIAL_TOKENS}")

        finished = [pid for pid in ids if self.exited[pid] >= EXIT_TO_WIN]
        if self.winner is None:
            if finished:
                raise ValueError(f"{finished[0]} has exited {EXIT_TO_WIN} tokens but no winner is set")
        elif self.winner not in finished:
            raise ValueError(f"winner {self.winner!r} has not exited {EXIT_TO_WIN} tokens")
        return self

    @classmethod
    def from_state(cls, state: GameState) -> "GameStateSchema":
        return cls(
            board=[[token.player for token in stack] for stack in state.board],
            unplaced=dict(state.unplaced),
            exited=dict(state.exited),
            players=[PlayerInfoSchema.model_validate(p) for p in state.players],
            current_index=state.current_index,
            winner=state.winner,
            message=state.message,
        )

    def to_state(self) -> GameState:
        return GameState(
            board=tuple(tuple(Token(pid) for pid in stack) for stack in self.board),
            unplaced=dict(self.unplaced),
            exited=dict(self.exited),
            players=tuple(p.to_player() for p in self.players),
            current_index=self.current_index,
            winner=self.winner,
            message=self.message,
        )


class ActionResultSchema(BaseModel):
    """Outcome of a submitted action."""
    success: bool
    state: Optional[GameStateSchema] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    changes: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ActionResult) -> "ActionResultSchema":
        return cls(
            success=result.success,
            state=GameStateSchema.from_state(result.new_state) if result.new_state else None,
            error=result.error,
            error_code=ErrorCode(result.error_code) if result.error_code else None,
            changes=list(result.state_changes),
        )
