"""
Bots module - Computer opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- EasyPolicy / MediumPolicy / HardPolicy: the three difficulty tiers
- HeuristicEvaluator: Scores game states
- choose_bot_action: One-call entry point for controllers
"""

from .policy import (
    BotPolicy,
    BotDecision,
    EasyPolicy,
    MediumPolicy,
    HardPolicy,
    ReplyModel,
    choose_bot_action,
    decide,
    newly_pinned_opponents,
    policy_for,
)
from .evaluator import HeuristicEvaluator, EvaluationWeights, StateEvaluation

__all__ = [
    "BotPolicy",
    "BotDecision",
    "EasyPolicy",
    "MediumPolicy",
    "HardPolicy",
    "ReplyModel",
    "choose_bot_action",
    "decide",
    "newly_pinned_opponents",
    "policy_for",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
]
