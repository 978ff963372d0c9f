"""
Session Manager - Creates and manages game sessions.

A session is one match, hosted in-process:
1. start_game() creates the initial state
2. Every action (human or bot) is gated by legal_actions() before apply
3. After each transition, listeners receive the new snapshot
4. When a bot is to act, its move is planned against a specific state
   version and discarded if the state moved on before it was resolved

Each session owns its single authoritative GameState. Transitions are
serialized by a per-session lock; separate sessions share nothing.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence
import logging
import random
import threading
import time
import uuid

from ..engine_core.action import Action, ActionResult, describe_action
from ..engine_core.action_generator import legal_actions
from ..engine_core.reducer import apply_action
from ..engine_core.state import Difficulty, GameState, PlayerInfo, create_initial_state
from ..bots import decide

logger = logging.getLogger(__name__)


StateListener = Callable[[GameState], None]


class SessionState(Enum):
    """State of a game session."""
    CREATED = "created"  # Session created, no game yet
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Ended before completion


@dataclass(frozen=True)
class PendingBotTurn:
    """A bot action computed against a specific state version."""
    version: int
    player_id: str
    action: Action
    explanation: str = ""


@dataclass
class Session:
    """
    A hotseat game session.

    Contains:
    - The current canonical game state and its version
    - Bot configuration (default difficulty, delay, RNG)
    - State-change listeners
    """
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: float = field(default_factory=time.time)

    state: SessionState = SessionState.CREATED
    game_state: GameState | None = None
    version: int = 0

    default_difficulty: Difficulty = Difficulty.MEDIUM
    bot_delay: float = 0.0
    rng: random.Random = field(default_factory=random.Random)

    _listeners: list[StateListener] = field(default_factory=list, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state in {SessionState.CREATED, SessionState.ACTIVE}

    @property
    def players(self) -> tuple[PlayerInfo, ...]:
        return self.game_state.players if self.game_state else ()

    def on_state_change(self, callback: StateListener) -> None:
        """Register a listener called with every new snapshot."""
        self._listeners.append(callback)

    def start_game(self, players: Sequence[PlayerInfo]) -> GameState:
        """Start (or restart) the match. Pending bot plans become stale."""
        with self._lock:
            self.game_state = create_initial_state(players)
            self.version += 1
            self.state = SessionState.ACTIVE
            logger.info(
                "Session %s started with %d player(s)", self.session_id, len(self.game_state.players)
            )
            self._emit()
            return self.game_state

    def legal_actions(self) -> list[Action]:
        """Legal actions for whoever is to act."""
        if not self.game_state:
            return []
        return legal_actions(self.game_state)

    def submit_action(
        self,
        action: Action,
        player_id: str | None = None,
        expected_version: int | None = None,
    ) -> ActionResult:
        """
        Validate and apply one action.

        player_id, when given, must be the player to act.
        expected_version, when given, must match the current version.
        """
        with self._lock:
            state = self.game_state
            if state is None:
                return ActionResult.failure("No game in progress", error_code="NO_GAME")
            if state.winner is not None:
                return ActionResult.failure("Game is over - no actions allowed", error_code="GAME_OVER")
            if expected_version is not None and expected_version != self.version:
                logger.info(
                    "Discarding stale action %s (version %d, current %d)",
                    describe_action(action), expected_version, self.version,
                )
                return ActionResult.failure("State changed since action was chosen", error_code="STALE_ACTION")
            current = state.current_player.player_id
            if player_id is not None and player_id != current:
                logger.warning("%s tried to act on %s's turn", player_id, current)
                return ActionResult.failure(f"Not {player_id}'s turn", error_code="NOT_YOUR_TURN")
            if action not in legal_actions(state):
                logger.warning("Illegal action rejected: %s", describe_action(action))
                return ActionResult.failure(
                    f"Illegal action: {describe_action(action)}", error_code="ILLEGAL_ACTION"
                )

            new_state = apply_action(state, action)
            self.game_state = new_state
            self.version += 1
            logger.debug(
                "Applied %s for %s; next player index %d",
                describe_action(action), current, new_state.current_index,
            )

            changes = [new_state.message] if new_state.message else []
            if new_state.winner is not None:
                self.state = SessionState.GAME_OVER
                changes.append(f"{new_state.winner} wins")
                logger.info("Session %s won by %s", self.session_id, new_state.winner)

            self._emit()
            return ActionResult.success_with_state(new_state, changes=changes)

    def plan_bot_turn(self) -> PendingBotTurn | None:
        """Compute the current bot's action, tagged with the state version."""
        with self._lock:
            state = self.game_state
            if state is None or state.winner is not None:
                return None
            player = state.current_player
            if not player.is_bot:
                return None
            version = self.version

        decision = decide(state, player.difficulty or self.default_difficulty, rng=self.rng)
        if decision is None:
            return None
        return PendingBotTurn(
            version=version,
            player_id=player.player_id,
            action=decision.action,
            explanation=decision.explanation,
        )

    def resolve_bot_turn(self, pending: PendingBotTurn) -> ActionResult:
        """Apply a planned bot action unless the state has moved on."""
        return self.submit_action(
            pending.action,
            player_id=pending.player_id,
            expected_version=pending.version,
        )

    def run_bot_turns(
        self,
        max_turns: int = 500,
        sleep: Callable[[float], None] = time.sleep,
    ) -> list[PendingBotTurn]:
        """
        Play bot turns until a human is to act or the game ends.

        Returns the bot turns that were applied.
        """
        played: list[PendingBotTurn] = []
        while len(played) < max_turns:
            pending = self.plan_bot_turn()
            if pending is None:
                break
            if self.bot_delay > 0:
                sleep(self.bot_delay)
            result = self.resolve_bot_turn(pending)
            if not result.success:
                # Stale or rejected
                break
            played.append(pending)
        return played

    def _emit(self) -> None:
        if self.game_state is None:
            return
        for callback in list(self._listeners):
            callback(self.game_state)


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions
    - Track active sessions
    - Clean up completed sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        default_difficulty: Difficulty = Difficulty.MEDIUM,
        bot_delay: float = 0.0,
        seed: int | None = None,
    ):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self.default_difficulty = default_difficulty
        self.bot_delay = bot_delay
        self.seed = seed

    def create_session(self, players: Sequence[PlayerInfo] | None = None) -> Session:
        """
        Create a new game session.

        Args:
            players: When given, the game is started immediately

        Returns:
            New Session
        """
        session = Session(
            default_difficulty=self.default_difficulty,
            bot_delay=self.bot_delay,
            rng=random.Random(self.seed),
        )
        if players is not None:
            session.start_game(players)

        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        with self._lock:
            return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> None:
        """
        End a session and remove it from memory.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session:
            won = session.game_state is not None and session.game_state.winner is not None
            if reason == "completed" and won:
                session.state = SessionState.GAME_OVER
            else:
                session.state = SessionState.ABANDONED
            session.game_state = None
            session.version += 1

    def _snapshot(self) -> list[tuple[str, Session]]:
        with self._lock:
            return list(self._sessions.items())

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._snapshot()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> None:
        """
        Remove finished sessions older than max_age.
        """
        current_time = time.time()
        to_remove = [
            sid for sid, session in self._snapshot()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        # end_session takes the lock itself
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
