"""
Rules - Read-only board queries and move resolution.

Everything here is a pure function of its inputs. The UI uses these
queries to render affordances; the action generator and the reducer use
them to enumerate and apply actions, so resolution logic lives in one place.

Five & Slide:
    A moved block steps one space in its direction. Full spaces (5 tokens)
    are skipped. A space with free room takes as many tokens as fit and the
    overflow keeps sliding the same way. Sliding forward past space 8 exits
    the board; sliding backward past space 1 rejects the whole move.
"""

from __future__ import annotations
from typing import Sequence

from .state import BOARD_SIZE, STACK_LIMIT, Board, GameState, Token
from .action import Direction, Landing, Move, MoveResolution


def is_pinned(stack: Sequence[Token], index: int) -> bool:
    """A token is pinned when anything sits on top of it."""
    return index < len(stack) - 1


def top_contiguous_count(stack: Sequence[Token], player_id: str) -> int:
    """Length of the run of `player_id` tokens at the top of the stack."""
    count = 0
    for token in reversed(stack):
        if token.player != player_id:
            break
        count += 1
    return count


def lowest_empty_index(board: Board) -> int | None:
    """Index of the lowest empty space, or None when every space is occupied."""
    for idx, stack in enumerate(board):
        if not stack:
            return idx
    return None


def _spaces_filled(board: Board, start: int, end: int) -> bool:
    return all(board[i] for i in range(start, end + 1))


def placement_destination(state: GameState) -> int | None:
    """
    Space that receives the next placed token.

    Space 1 wins when spaces 2-7 are all occupied, space 8 wins when
    spaces 1-7 are; otherwise the lowest empty space.
    """
    board = state.board
    empty = lowest_empty_index(board)
    if empty is None:
        return None

    if _spaces_filled(board, 1, 6) and not board[0]:
        return 0

    if _spaces_filled(board, 0, 6) and not board[BOARD_SIZE - 1]:
        return BOARD_SIZE - 1

    return empty


def can_place(state: GameState) -> bool:
    """Whether the current player may place a token."""
    dest = placement_destination(state)
    if dest is None:
        return False
    player_id = state.current_player.player_id
    return state.unplaced.get(player_id, 0) > 0 and len(state.board[dest]) < STACK_LIMIT


def resolve_move(
    board: Board,
    from_space: int,
    direction: Direction,
    count: int,
) -> MoveResolution | None:
    """
    Resolve moving the top `count` tokens of `from_space`.

    Returns None when any carried token would slide backward off the
    board, or when nothing is deposited or exited. Ownership of the moved
    run is not checked here.
    """
    if not 0 <= from_space < BOARD_SIZE:
        return None
    source = board[from_space]
    if count < 1 or count > len(source):
        return None

    stacks = [list(stack) for stack in board]
    cut = len(source) - count
    block = stacks[from_space][cut:]
    del stacks[from_space][cut:]

    placements: list[tuple[int, int]] = []
    exited = 0
    pos = from_space + direction.delta
    while block:
        if pos >= BOARD_SIZE:
            exited = len(block)
            block = []
            break
        if pos < 0:
            return None
        free = STACK_LIMIT - len(stacks[pos])
        if free > 0:
            landed, block = block[:free], block[free:]
            stacks[pos].extend(landed)
            placements.append((pos, len(landed)))
        pos += direction.delta

    if not placements and not exited:
        return None

    return MoveResolution(
        board=tuple(tuple(stack) for stack in stacks),
        placements=tuple(placements),
        exited=exited,
    )


def predict_landing(state: GameState, move: Move) -> Landing | None:
    """
    Predicted landing for a hypothetical move.

    exit when any token of the block leaves the board, otherwise the first
    space the block reaches, None when the move cannot resolve.
    """
    resolution = resolve_move(state.board, move.from_space, move.direction, move.count)
    if resolution is None:
        return None
    return resolution.landing


def count_pinned_opponents(board: Board, player_id: str) -> int:
    """Number of pinned tokens not owned by `player_id`."""
    total = 0
    for stack in board:
        for idx, token in enumerate(stack):
            if token.player != player_id and is_pinned(stack, idx):
                total += 1
    return total
