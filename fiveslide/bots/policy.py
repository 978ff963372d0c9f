"""
Bot Policy - Difficulty-tiered decision-making.

A BotPolicy takes a game state and its legal actions and returns a
decision. There are exactly three policies, one per Difficulty:

- Easy:   random, leaning towards moves that exit tokens
- Medium: 1-ply lookahead with landing and pinning bonuses
- Hard:   1-ply lookahead, minus the next player's best reply, plus a
          small bonus for the bot's best follow-up

Policies are stateless apart from their RNG; the same state always yields
the same choice for Medium and Hard.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
import logging
import random

from ..engine_core.action import Action, Bubble, Move, describe_action
from ..engine_core.action_generator import legal_actions as generate_legal_actions
from ..engine_core.reducer import apply_action
from ..engine_core.rules import placement_destination, predict_landing, resolve_move
from ..engine_core.state import Difficulty
from .evaluator import HeuristicEvaluator

if TYPE_CHECKING:
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    - Evaluation details (for debugging)
    """
    action: Action
    explanation: str = ""
    score: float = 0.0
    evaluated_actions: int = 0
    details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.
    """

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            legal_actions: Legal actions for the current player

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


def newly_pinned_opponents(state: GameState, action: Action) -> int:
    """
    Opponent tokens that lose their top spot because of `action`.

    Only a stack's top token can be unpinned, so each covered stack
    contributes at most one.
    """
    player_id = state.current_player.player_id

    def covers_opponent(space: int) -> bool:
        stack = state.board[space]
        return bool(stack) and stack[-1].player != player_id

    if isinstance(action, Move):
        resolution = resolve_move(state.board, action.from_space, action.direction, action.count)
        if resolution is None:
            return 0
        return sum(1 for space, _ in resolution.placements if covers_opponent(space))

    if isinstance(action, Bubble):
        return 1 if covers_opponent(action.space) else 0

    dest = placement_destination(state)
    return 1 if dest is not None and covers_opponent(dest) else 0


def _lands_on_exit(state: GameState, action: Action) -> bool:
    if not isinstance(action, Move):
        return False
    landing = predict_landing(state, action)
    return landing is not None and landing.is_exit


class EasyPolicy(BotPolicy):
    """
    Mostly random play.

    With probability `exit_probability` an exiting move is taken when one
    exists; otherwise any legal action, uniformly.
    """

    def __init__(self, rng: random.Random | None = None, exit_probability: float = 0.7):
        self.rng = rng or random.Random()
        self.exit_probability = exit_probability

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        exit_moves = [a for a in legal_actions if _lands_on_exit(state, a)]
        if exit_moves and self.rng.random() < self.exit_probability:
            return BotDecision(
                action=self.rng.choice(exit_moves),
                explanation="Exit move",
                evaluated_actions=len(legal_actions),
            )

        return BotDecision(
            action=self.rng.choice(legal_actions),
            explanation="Selected randomly",
            evaluated_actions=len(legal_actions),
        )


class MediumPolicy(BotPolicy):
    """
    Greedy 1-ply lookahead.

    score = evaluation of the successor
          + landing bonus (exit > space > no landing)
          + pin bonus per opponent token newly covered
    """

    def __init__(
        self,
        evaluator: HeuristicEvaluator | None = None,
        exit_bonus: float = 5.0,
        space_bonus: float = 0.0,
        no_landing_bonus: float = -10.0,
        pin_bonus: float = 2.0,
    ):
        self.evaluator = evaluator or HeuristicEvaluator()
        self.exit_bonus = exit_bonus
        self.space_bonus = space_bonus
        self.no_landing_bonus = no_landing_bonus
        self.pin_bonus = pin_bonus

    def landing_bonus(self, state: GameState, action: Action) -> float:
        landing = predict_landing(state, action) if isinstance(action, Move) else None
        if landing is None:
            return self.no_landing_bonus
        return self.exit_bonus if landing.is_exit else self.space_bonus

    def score_action(self, state: GameState, action: Action) -> float:
        player_id = state.current_player.player_id
        successor = apply_action(state, action)
        return (
            self.evaluator.score(successor, player_id)
            + self.landing_bonus(state, action)
            + self.pin_bonus * newly_pinned_opponents(state, action)
        )

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        best_action, best_score = legal_actions[0], float("-inf")
        for action in legal_actions:
            score = self.score_action(state, action)
            if score > best_score:
                best_action, best_score = action, score

        return BotDecision(
            action=best_action,
            explanation=f"Best 1-ply score {best_score:.1f}",
            score=best_score,
            evaluated_actions=len(legal_actions),
        )


class ReplyModel(Enum):
    """Which opponent reply the hard bot's follow-up term assumes."""
    FIRST = "first"  # First enumerated reply
    BEST = "best"  # The reply that scored best for the opponent


class HardPolicy(BotPolicy):
    """
    Lookahead against the next player's best reply.

    combined = self score
             + follow_up_weight * best follow-up after the opponent reply
             - reply_weight * opponent's best reply score

    The follow-up term only counts when the turn is back with the bot
    after the reply (always true with two players).
    """

    def __init__(
        self,
        evaluator: HeuristicEvaluator | None = None,
        reply_weight: float = 0.6,
        follow_up_weight: float = 0.2,
        reply_model: ReplyModel = ReplyModel.FIRST,
    ):
        self.evaluator = evaluator or HeuristicEvaluator()
        self.reply_weight = reply_weight
        self.follow_up_weight = follow_up_weight
        self.reply_model = reply_model

    def _best_reply(self, state: GameState) -> tuple[float, GameState | None]:
        """Best score the player to move can reach, and the first or best reply state."""
        replies = generate_legal_actions(state)
        if not replies:
            return 0.0, None
        opponent_id = state.current_player.player_id

        best_score, best_after = float("-inf"), None
        first_after = None
        for reply in replies:
            after = apply_action(state, reply)
            if first_after is None:
                first_after = after
            score = self.evaluator.score(after, opponent_id)
            if score > best_score:
                best_score, best_after = score, after

        if self.reply_model is ReplyModel.FIRST:
            return best_score, first_after
        return best_score, best_after

    def _best_follow_up(self, state: GameState | None, player_id: str) -> float:
        if state is None or state.winner is not None:
            return 0.0
        if state.current_player.player_id != player_id:
            return 0.0
        follow_ups = generate_legal_actions(state)
        if not follow_ups:
            return 0.0
        return max(
            self.evaluator.score(apply_action(state, action), player_id)
            for action in follow_ups
        )

    def score_action(self, state: GameState, action: Action) -> tuple[float, dict[str, float]]:
        player_id = state.current_player.player_id
        successor = apply_action(state, action)
        self_score = self.evaluator.score(successor, player_id)

        reply_score, follow_up = 0.0, 0.0
        if successor.winner is None and successor.current_player.player_id != player_id:
            reply_score, reply_state = self._best_reply(successor)
            follow_up = self._best_follow_up(reply_state, player_id)

        combined = (
            self_score
            + self.follow_up_weight * follow_up
            - self.reply_weight * reply_score
        )
        return combined, {"self": self_score, "reply": reply_score, "follow_up": follow_up}

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        best_action, best_score = legal_actions[0], float("-inf")
        best_terms: dict[str, float] = {}
        for action in legal_actions:
            score, terms = self.score_action(state, action)
            if score > best_score:
                best_action, best_score, best_terms = action, score, terms

        return BotDecision(
            action=best_action,
            explanation=f"Best score {best_score:.1f} against best reply",
            score=best_score,
            evaluated_actions=len(legal_actions),
            details=best_terms,
        )


def policy_for(
    difficulty: Difficulty | str,
    rng: random.Random | None = None,
    evaluator: HeuristicEvaluator | None = None,
) -> BotPolicy:
    """Build the policy for a difficulty tier."""
    difficulty = Difficulty(difficulty)
    if difficulty is Difficulty.EASY:
        return EasyPolicy(rng=rng)
    if difficulty is Difficulty.MEDIUM:
        return MediumPolicy(evaluator=evaluator)
    return HardPolicy(evaluator=evaluator)


def decide(
    state: GameState,
    difficulty: Difficulty | str,
    rng: random.Random | None = None,
) -> BotDecision | None:
    """
    Full decision for the current player, or None when nothing is legal.
    """
    if not state.players or state.winner is not None:
        return None
    legal = generate_legal_actions(state)
    if not legal:
        logger.debug("No legal action for %s", state.current_player.player_id)
        return None

    policy = policy_for(difficulty, rng=rng)
    decision = policy.select_action(state, legal)
    logger.debug(
        "%s (%s) chose %s: %s",
        state.current_player.player_id,
        policy.get_name(),
        describe_action(decision.action),
        decision.explanation,
    )
    return decision


def choose_bot_action(
    state: GameState,
    difficulty: Difficulty | str,
    rng: random.Random | None = None,
) -> Action | None:
    """Select an action for the current player, or None if none is legal."""
    decision = decide(state, difficulty, rng=rng)
    return decision.action if decision else None
