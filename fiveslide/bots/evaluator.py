"""
Heuristic Evaluator - Scores game states for bot decision-making.

The evaluator assigns a numeric score to a state from one player's
perspective, based on:
- Progress (own exited tokens)
- Opportunity (number of legal actions in the state)
- Presence (own tokens on the board)
- Pressure (opponent tokens pinned, the leading opponent's exits)

Weights can be adjusted to tune bot play.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.action_generator import legal_actions
from ..engine_core.rules import count_pinned_opponents

if TYPE_CHECKING:
    from ..engine_core.state import GameState


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance. Negative values penalise.
    """
    exited: float = 6.0  # Per own exited token
    mobility: float = 1.0  # Per legal action in the evaluated state
    board_presence: float = 0.5  # Per own token on the board
    pinned_opponents: float = 1.5  # Per opponent token pinned
    opponent_exited: float = -4.0  # Times the best opponent's exit count
    win: float = 0.0  # Opt-in: added when the evaluated player has won, subtracted when another has


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    total_score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class HeuristicEvaluator:
    """
    Evaluates game states using weighted heuristics.

    Used by bots for lookahead:
    1. Generate legal actions
    2. Apply each action to get new state
    3. Evaluate new states
    4. Select action leading to best state
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, state: GameState, for_player_id: str) -> StateEvaluation:
        """Evaluate a game state from a player's perspective."""
        w = self.weights
        opponent_exits = [
            count for pid, count in state.exited.items() if pid != for_player_id
        ]

        features = {
            "exited": w.exited * state.exited.get(for_player_id, 0),
            "mobility": w.mobility * len(legal_actions(state)),
            "board_presence": w.board_presence * state.tokens_on_board(for_player_id),
            "pinned_opponents": w.pinned_opponents
            * count_pinned_opponents(state.board, for_player_id),
            "opponent_exited": w.opponent_exited * max(opponent_exits, default=0),
        }

        # Decided games only shift the score when a win weight is configured
        if w.win and state.winner is not None:
            features["win"] = w.win if state.winner == for_player_id else -w.win

        return StateEvaluation(
            total_score=sum(features.values()),
            feature_breakdown=features,
        )

    def score(self, state: GameState, for_player_id: str) -> float:
        """Total score only."""
        return self.evaluate(state, for_player_id).total_score
