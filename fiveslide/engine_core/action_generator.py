"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. UI to show available actions
3. Validation (is this action in legal_actions?)

Actions come in priority classes. A player must take the highest class
available:
1. Any legal move  -> all moves, plus Place when it is also legal
2. Place is legal  -> [Place]
3. Otherwise       -> every Bubble of a pinned own token (may be empty)
"""

from __future__ import annotations

from .state import GameState
from .action import Action, Bubble, Direction, Move, Place
from .rules import can_place, is_pinned, resolve_move, top_contiguous_count


def move_options(state: GameState) -> list[Move]:
    """All resolvable moves for the current player."""
    moves: list[Move] = []
    player_id = state.current_player.player_id
    for idx, stack in enumerate(state.board):
        max_count = top_contiguous_count(stack, player_id)
        if max_count == 0:
            continue
        for direction in (Direction.FORWARD, Direction.BACKWARD):
            for count in range(1, max_count + 1):
                if resolve_move(state.board, idx, direction, count) is None:
                    continue
                moves.append(Move(from_space=idx, direction=direction, count=count))
    return moves


def bubble_options(state: GameState) -> list[Bubble]:
    """Every pinned token of the current player, by space then height."""
    player_id = state.current_player.player_id
    return [
        Bubble(space=space, token_index=idx)
        for space, stack in enumerate(state.board)
        for idx, token in enumerate(stack)
        if token.player == player_id and is_pinned(stack, idx)
    ]


def legal_actions(state: GameState) -> list[Action]:
    """
    Generate all legal actions for the current player.

    Returns an empty list once the game has a winner.
    """
    if state.winner is not None or not state.players:
        return []

    moves = move_options(state)
    placement_legal = can_place(state)

    if moves:
        actions: list[Action] = list(moves)
        if placement_legal:
            actions.append(Place())
        return actions

    if placement_legal:
        return [Place()]

    return list(bubble_options(state))


def is_legal(state: GameState, action: Action) -> bool:
    """Check if an action is legal."""
    return action in legal_actions(state)
