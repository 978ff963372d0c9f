"""
Reducer - Applies actions to game state.

The reducer is the single point of state transition.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Total: an action that cannot be applied leaves the state unchanged
- Reducer.apply() is the gated form: validates against legal_actions()
  and returns an ActionResult with success/failure
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .state import EXIT_TO_WIN, STACK_LIMIT, GameState, Token, next_player_index
from .action import Action, ActionResult, Bubble, Move, Place, describe_action
from .action_generator import legal_actions
from .rules import is_pinned, placement_destination, resolve_move, top_contiguous_count

logger = logging.getLogger(__name__)


def _apply_move(state: GameState, action: Move) -> GameState:
    player_id = state.current_player.player_id
    if not 0 <= action.from_space < len(state.board):
        return state
    if action.count > top_contiguous_count(state.board[action.from_space], player_id):
        return state

    resolution = resolve_move(state.board, action.from_space, action.direction, action.count)
    if resolution is None:
        return state

    exited = dict(state.exited)
    if resolution.exited:
        exited[player_id] = exited.get(player_id, 0) + resolution.exited
        message = f"{player_id} exited {resolution.exited} token(s)."
    else:
        message = (
            f"{player_id} moved {action.count} token(s) from space {action.from_space + 1} "
            f"to space {resolution.placements[0][0] + 1}."
        )

    winner = player_id if exited.get(player_id, 0) >= EXIT_TO_WIN else None
    next_index = state.current_index if winner else next_player_index(state)

    return state._copy_with(
        board=resolution.board,
        exited=exited,
        current_index=next_index,
        winner=winner,
        message=message,
    )


def _apply_place(state: GameState) -> GameState:
    player_id = state.current_player.player_id
    dest = placement_destination(state)
    if dest is None or state.unplaced.get(player_id, 0) <= 0:
        return state
    if len(state.board[dest]) >= STACK_LIMIT:
        return state

    board = list(state.board)
    board[dest] = board[dest] + (Token(player_id),)
    unplaced = dict(state.unplaced)
    unplaced[player_id] -= 1

    return state._copy_with(
        board=tuple(board),
        unplaced=unplaced,
        current_index=next_player_index(state),
        message=f"Placed on space {dest + 1}",
    )


def _apply_bubble(state: GameState, action: Bubble) -> GameState:
    player_id = state.current_player.player_id
    if not 0 <= action.space < len(state.board):
        return state
    stack = state.board[action.space]
    if not 0 <= action.token_index < len(stack):
        return state
    if stack[action.token_index].player != player_id or not is_pinned(stack, action.token_index):
        return state

    token = stack[action.token_index]
    rest = stack[:action.token_index] + stack[action.token_index + 1:]
    board = list(state.board)
    board[action.space] = rest + (token,)

    return state._copy_with(
        board=tuple(board),
        current_index=next_player_index(state),
        message="Bubbled up",
    )


def apply_action(state: GameState, action: Action) -> GameState:
    """
    Apply an action and return the next state.

    Callers are expected to gate with legal_actions() first; anything that
    cannot be applied returns the input state unchanged.
    """
    if state.winner is not None or not state.players:
        return state
    if isinstance(action, Move):
        return _apply_move(state, action)
    if isinstance(action, Place):
        return _apply_place(state)
    if isinstance(action, Bubble):
        return _apply_bubble(state, action)
    return state


@dataclass
class Reducer:
    """
    Gated reducer: validates before applying.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            error, code = validation_error
            logger.warning("Rejected %s: %s", describe_action(action), error)
            return ActionResult.failure(error, error_code=code)

        new_state = apply_action(state, action)
        changes = [new_state.message] if new_state.message else []
        if new_state.winner is not None:
            changes.append(f"{new_state.winner} wins")
        logger.debug(
            "Applied %s for %s; next index %d",
            describe_action(action),
            state.current_player.player_id,
            new_state.current_index,
        )
        return ActionResult.success_with_state(new_state, changes=changes)

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action is legal in the current state.

        Returns (message, error code) if invalid, None if valid.
        """
        if state.winner is not None:
            return "Game is over - no actions allowed", "GAME_OVER"

        if action not in legal_actions(state):
            return f"Illegal action: {describe_action(action)}", "ILLEGAL_ACTION"

        return None
