"""
Tests for bot action selection and legality.

Tests:
- Every tier selects legal actions
- Easy leans towards exits
- Medium and Hard scoring terms
- Evaluator features
"""

import random

import pytest

from ..bots import (
    EasyPolicy,
    HardPolicy,
    MediumPolicy,
    ReplyModel,
    choose_bot_action,
    decide,
    newly_pinned_opponents,
    policy_for,
)
from ..bots.evaluator import EvaluationWeights, HeuristicEvaluator
from ..engine_core.action import Bubble, Direction, Move, Place
from ..engine_core.action_generator import legal_actions
from ..engine_core.reducer import apply_action
from ..engine_core.state import Difficulty, PlayerInfo
from .conftest import BLUE, RED, stack


EXIT_MOVE = Move(7, Direction.FORWARD, 1)


class FixedRandom(random.Random):
    """Random stand-in with a fixed draw that always picks the first option."""

    def __init__(self, draw):
        super().__init__(0)
        self.draw = draw

    def random(self):
        return self.draw

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def exit_available(make_state):
    """RED can exit from space 8, BLUE sits on space 1."""
    return make_state({7: stack(RED), 0: stack(BLUE)}, unplaced={RED: 6, BLUE: 6})


class TestBotActionLegality:
    """Tests that bots only select legal actions."""

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_selects_legal_action(self, make_state, difficulty):
        state = make_state({
            0: stack(RED, BLUE),
            2: stack(BLUE, RED, RED),
            5: stack(RED),
            7: stack(BLUE, BLUE),
        }, unplaced={RED: 3, BLUE: 4})
        decision = decide(state, difficulty, rng=random.Random(3))
        assert decision.action in legal_actions(state)
        assert decision.evaluated_actions == len(legal_actions(state))

    @pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
    def test_bot_game_stays_legal(self, two_players, difficulty):
        from ..engine_core.state import create_initial_state

        rng = random.Random(11)
        state = create_initial_state(two_players)
        for _ in range(20):
            legal = legal_actions(state)
            if not legal:
                break
            action = choose_bot_action(state, difficulty, rng=rng)
            assert action in legal
            state = apply_action(state, action)

    def test_no_decision_after_win(self, make_state):
        state = make_state({0: stack(RED)}, exited={RED: 5, BLUE: 0}, winner=RED)
        assert decide(state, Difficulty.HARD) is None
        assert choose_bot_action(state, Difficulty.HARD) is None

    def test_no_decision_without_legal_action(self, make_state):
        state = make_state({0: stack(BLUE)}, unplaced={RED: 0, BLUE: 6})
        assert decide(state, "medium") is None

    @pytest.mark.parametrize("policy", [EasyPolicy(), MediumPolicy(), HardPolicy()])
    def test_empty_legal_list_raises(self, opening_state, policy):
        with pytest.raises(ValueError):
            policy.select_action(opening_state, [])


class TestPolicyFactory:
    """Tests for difficulty dispatch."""

    def test_policy_types(self):
        assert isinstance(policy_for(Difficulty.EASY), EasyPolicy)
        assert isinstance(policy_for(Difficulty.MEDIUM), MediumPolicy)
        assert isinstance(policy_for(Difficulty.HARD), HardPolicy)

    def test_accepts_strings(self):
        assert isinstance(policy_for("hard"), HardPolicy)

    def test_unknown_difficulty(self):
        with pytest.raises(ValueError):
            policy_for("impossible")


class TestEasyPolicy:
    """Tests for the easy tier."""

    def test_takes_exit_when_draw_is_low(self, exit_available):
        policy = EasyPolicy(rng=FixedRandom(0.1))
        decision = policy.select_action(exit_available, legal_actions(exit_available))
        assert decision.action == EXIT_MOVE
        assert decision.explanation == "Exit move"

    def test_random_when_draw_is_high(self, exit_available):
        policy = EasyPolicy(rng=FixedRandom(0.9))
        legal = legal_actions(exit_available)
        decision = policy.select_action(exit_available, legal)
        assert decision.action == legal[0]
        assert decision.explanation == "Selected randomly"

    def test_random_without_exit_moves(self, opening_state):
        policy = EasyPolicy(rng=FixedRandom(0.0))
        decision = policy.select_action(opening_state, [Place()])
        assert decision.action == Place()
        assert decision.explanation == "Selected randomly"

    def test_seeded_rng_is_reproducible(self, make_state):
        state = make_state({0: stack(RED, RED), 4: stack(RED)}, unplaced={RED: 4, BLUE: 7})
        first = decide(state, Difficulty.EASY, rng=random.Random(5))
        second = decide(state, Difficulty.EASY, rng=random.Random(5))
        assert first.action == second.action


class TestMediumPolicy:
    """Tests for the medium tier."""

    def test_prefers_exit(self, exit_available):
        decision = decide(exit_available, Difficulty.MEDIUM)
        assert decision.action == EXIT_MOVE
        assert decision.score == pytest.approx(13.0)

    def test_landing_bonus(self, exit_available):
        policy = MediumPolicy()
        assert policy.landing_bonus(exit_available, EXIT_MOVE) == 5.0
        assert policy.landing_bonus(exit_available, Move(7, Direction.BACKWARD, 1)) == 0.0
        assert policy.landing_bonus(exit_available, Place()) == -10.0

    def test_prefers_pinning(self, make_state):
        """Covering an opponent beats stepping onto an empty space."""
        state = make_state({2: stack(RED), 3: stack(BLUE)}, unplaced={RED: 0, BLUE: 7})
        decision = decide(state, Difficulty.MEDIUM)
        assert decision.action == Move(2, Direction.FORWARD, 1)

    def test_deterministic(self, exit_available):
        first = decide(exit_available, "medium")
        second = decide(exit_available, "medium")
        assert first.action == second.action
        assert first.score == second.score


class TestNewlyPinned:
    """Tests for newly pinned opponent counting."""

    def test_move_onto_opponent(self, make_state):
        state = make_state({0: stack(RED), 1: stack(BLUE)})
        assert newly_pinned_opponents(state, Move(0, Direction.FORWARD, 1)) == 1

    def test_split_move_covers_two(self, make_state):
        state = make_state({
            0: stack(RED, RED),
            1: stack(BLUE, BLUE, BLUE, BLUE),
            2: stack(BLUE),
        })
        assert newly_pinned_opponents(state, Move(0, Direction.FORWARD, 2)) == 2

    def test_place_on_empty(self, make_state):
        state = make_state({0: stack(RED), 1: stack(BLUE)})
        assert newly_pinned_opponents(state, Place()) == 0

    def test_bubble_over_opponent(self, make_state):
        state = make_state({1: stack(RED, BLUE)})
        assert newly_pinned_opponents(state, Bubble(1, 0)) == 1


class TestHardPolicy:
    """Tests for the hard tier."""

    def test_winning_exit_scores_plain_formula(self, make_state):
        state = make_state(
            {7: stack(RED), 0: stack(BLUE)},
            unplaced={RED: 2, BLUE: 6},
            exited={RED: 4, BLUE: 0},
        )
        combined, terms = HardPolicy().score_action(state, EXIT_MOVE)
        assert combined == pytest.approx(30.0)
        assert terms == {"self": 30.0, "reply": 0.0, "follow_up": 0.0}

    def test_win_weight_takes_winning_exit(self, make_state):
        state = make_state(
            {7: stack(RED), 0: stack(BLUE)},
            unplaced={RED: 2, BLUE: 6},
            exited={RED: 4, BLUE: 0},
        )
        policy = HardPolicy(evaluator=HeuristicEvaluator(EvaluationWeights(win=1000.0)))
        decision = policy.select_action(state, legal_actions(state))
        assert decision.action == EXIT_MOVE
        assert decision.details["reply"] == 0.0
        assert decision.details["follow_up"] == 0.0

    def test_follow_up_assumes_first_reply(self, make_state):
        """
        After RED places on space 2, BLUE's first reply covers it while
        BLUE's best reply is to place; the follow-up differs between them.
        """
        state = make_state({0: stack(BLUE)}, unplaced={RED: 7, BLUE: 6})

        _, first = HardPolicy().score_action(state, Place())
        _, best = HardPolicy(reply_model=ReplyModel.BEST).score_action(state, Place())

        assert first["reply"] == pytest.approx(4.0)
        assert best["reply"] == pytest.approx(4.0)
        assert first["follow_up"] == pytest.approx(4.0)
        assert best["follow_up"] == pytest.approx(5.0)

    def test_first_reply_is_first_enumerated(self, make_state):
        state = make_state({0: stack(BLUE)}, unplaced={RED: 7, BLUE: 6})
        evaluator = HeuristicEvaluator()
        successor = apply_action(state, Place())
        replies = legal_actions(successor)
        assert replies == [Move(0, Direction.FORWARD, 1), Place()]

        after_first = apply_action(successor, replies[0])
        expected = max(
            evaluator.score(apply_action(after_first, action), RED)
            for action in legal_actions(after_first)
        )
        _, terms = HardPolicy(evaluator=evaluator).score_action(state, Place())
        assert terms["follow_up"] == pytest.approx(expected)

    def test_solo_game_skips_reply(self, make_state):
        solo = [PlayerInfo(player_id=RED, name="Red")]
        state = make_state({3: stack(RED)}, unplaced={RED: 6}, exited={RED: 0}, players=solo)
        decision = decide(state, Difficulty.HARD)
        assert decision.action in legal_actions(state)
        assert decision.details["reply"] == 0.0
        assert decision.details["follow_up"] == 0.0

    def test_score_terms_combine(self, exit_available):
        policy = HardPolicy()
        for action in legal_actions(exit_available):
            combined, terms = policy.score_action(exit_available, action)
            expected = terms["self"] + 0.2 * terms["follow_up"] - 0.6 * terms["reply"]
            assert combined == pytest.approx(expected)

    def test_deterministic(self, exit_available):
        first = decide(exit_available, Difficulty.HARD)
        second = decide(exit_available, Difficulty.HARD)
        assert first.action == second.action
        assert first.score == second.score

    def test_best_reply_model(self, exit_available):
        policy = HardPolicy(reply_model=ReplyModel.BEST)
        legal = legal_actions(exit_available)
        decision = policy.select_action(exit_available, legal)
        assert decision.action in legal


class TestEvaluator:
    """Tests for the heuristic evaluator."""

    def test_feature_formula(self, make_state):
        state = make_state(
            {0: stack(BLUE, RED), 3: stack(RED, BLUE)},
            unplaced={RED: 3, BLUE: 2},
            exited={RED: 2, BLUE: 3},
        )
        evaluation = HeuristicEvaluator().evaluate(state, RED)
        mobility = len(legal_actions(state))

        assert evaluation.feature_breakdown == {
            "exited": 12.0,
            "mobility": float(mobility),
            "board_presence": 1.0,
            "pinned_opponents": 1.5,
            "opponent_exited": -12.0,
        }
        assert evaluation.total_score == pytest.approx(mobility + 2.5)

    def test_won_state_uses_plain_formula(self, make_state):
        state = make_state({}, exited={RED: 5, BLUE: 0}, winner=RED)
        evaluator = HeuristicEvaluator()
        assert evaluator.score(state, RED) == pytest.approx(30.0)
        assert evaluator.score(state, BLUE) == pytest.approx(-20.0)
        assert "win" not in evaluator.evaluate(state, RED).feature_breakdown

    def test_opt_in_win_weight(self, make_state):
        state = make_state({}, exited={RED: 5, BLUE: 0}, winner=RED)
        evaluator = HeuristicEvaluator(EvaluationWeights(win=1000.0))
        assert evaluator.evaluate(state, RED).feature_breakdown["win"] == 1000.0
        assert evaluator.evaluate(state, BLUE).feature_breakdown["win"] == -1000.0
        assert evaluator.score(state, RED) == pytest.approx(1030.0)

    def test_custom_weights(self, make_state):
        state = make_state({0: stack(RED)}, exited={RED: 1, BLUE: 0})
        weights = EvaluationWeights(
            exited=1.0, mobility=0.0, board_presence=0.0, pinned_opponents=0.0, opponent_exited=0.0
        )
        assert HeuristicEvaluator(weights).score(state, RED) == 1.0
