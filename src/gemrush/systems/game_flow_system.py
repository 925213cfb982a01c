"""Session coordinator: status transitions, score keeping and end conditions."""
from __future__ import annotations

import logging

from esper import World

from gemrush.components.cascade_outcome import CascadeOutcome
from gemrush.components.game_state import GameState, GameStatus
from gemrush.constants import EXTRA_MOVES, EXTRA_TIME, LEVEL_TARGET_BASE, LEVEL_TARGET_STEP
from gemrush.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_BUDGET_CHANGED,
    EVENT_CASCADE_COMPLETE,
    EVENT_LEVEL_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_ENDED,
    EVENT_TICK,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from gemrush.systems.board_ops import get_board, initialize_board
from gemrush.systems.turn_state_utils import get_or_create_turn_state
from gemrush.utils.game_state import get_game_state, set_game_status

logger = logging.getLogger(__name__)


def level_target(level: int) -> int:
    """Target score for levels after the first."""
    return LEVEL_TARGET_BASE * level + LEVEL_TARGET_STEP * (level - 1)


class GameFlowSystem:
    """Drives IDLE -> PLAYING -> (RESOLVING -> PLAYING)* -> COMPLETED | FAILED.

    Moves and time are budgets owned by the caller's configuration; this
    system only counts them down and ends the session when one runs out
    before the target score is reached. A completed session can move on to
    the next level with a fresh board and budgets.
    """

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        state = self._state()
        self._move_limit = state.move_limit
        self._time_limit = state.time_remaining
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self._on_swap_valid)
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self._on_cascade_complete)
        self.event_bus.subscribe(EVENT_TICK, self._on_tick)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        state = self._state()
        if state.status is not GameStatus.IDLE:
            raise RuntimeError(f"Session already started ({state.status.name})")
        logger.info(
            "Session started: target=%d moves=%s time=%s",
            state.target_score,
            state.move_limit,
            state.time_remaining,
        )
        set_game_status(self.world, self.event_bus, GameStatus.PLAYING)
        self.event_bus.emit(EVENT_BOARD_CHANGED, board=get_board(self.world), reason="start")

    def restart(self) -> None:
        """Replay the current level: fresh board, zeroed score, full budgets."""
        self._reset_level()
        logger.info("Session restarted at level %d", self._state().level)
        set_game_status(self.world, self.event_bus, GameStatus.PLAYING)
        self.event_bus.emit(EVENT_BOARD_CHANGED, board=get_board(self.world), reason="restart")

    def next_level(self) -> int:
        """Advance a completed session to the next level and return its number.

        The level's score is banked into ``total_score`` and play resumes on a
        fresh board with full budgets and a higher target.
        """
        state = self._state()
        if state.status is not GameStatus.COMPLETED:
            raise RuntimeError(f"Next level needs a completed session ({state.status.name})")
        state.banked_score += state.score
        state.level += 1
        state.target_score = level_target(state.level)
        self._reset_level()
        logger.info("Advanced to level %d: target=%d", state.level, state.target_score)
        self.event_bus.emit(EVENT_LEVEL_CHANGED, level=state.level, target_score=state.target_score)
        set_game_status(self.world, self.event_bus, GameStatus.PLAYING)
        self.event_bus.emit(EVENT_BOARD_CHANGED, board=get_board(self.world), reason="level")
        return state.level

    def add_moves(self, count: int = EXTRA_MOVES) -> bool:
        """Extend the move budget. Returns False when the session has no move limit."""
        state = self._check_boostable(count)
        if state.move_limit is None:
            return False
        state.move_limit += count
        self._emit_budget(state)
        return True

    def add_time(self, seconds: float = EXTRA_TIME) -> bool:
        """Extend the time budget. Returns False when the session has no time limit."""
        state = self._check_boostable(seconds)
        if state.time_remaining is None:
            return False
        state.time_remaining += seconds
        self._emit_budget(state)
        return True

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_swap_valid(self, sender, **payload) -> None:
        state = self._state()
        if state.status is not GameStatus.PLAYING:
            return
        state.moves_used += 1
        set_game_status(self.world, self.event_bus, GameStatus.RESOLVING)

    def _on_cascade_complete(self, sender, **payload) -> None:
        outcome: CascadeOutcome | None = payload.get("outcome")
        state = self._state()
        if outcome is None or state.is_over:
            return
        state.last_cascade_depth = outcome.cascade_depth
        if outcome.score_delta:
            state.score += outcome.score_delta
            self.event_bus.emit(EVENT_SCORE_CHANGED, delta=outcome.score_delta, total=state.score)
        set_game_status(self.world, self.event_bus, GameStatus.PLAYING)
        self._check_end_conditions()

    def _on_tick(self, sender, **payload) -> None:
        state = self._state()
        if state.status is not GameStatus.PLAYING or state.time_remaining is None:
            return
        dt = float(payload.get("dt", 0.0))
        state.time_remaining = max(0.0, state.time_remaining - dt)
        if state.time_remaining <= 0.0:
            self._end(GameStatus.FAILED, reason="time")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reset_level(self) -> None:
        state = self._state()
        state.score = 0
        state.moves_used = 0
        state.last_cascade_depth = 0
        state.move_limit = self._move_limit
        state.time_remaining = self._time_limit
        turn = get_or_create_turn_state(self.world)
        turn.in_flight = False
        turn.cascade_active = False
        turn.cascade_depth = 0
        initialize_board(self.world)

    def _check_boostable(self, amount) -> GameState:
        state = self._state()
        if amount <= 0:
            raise ValueError(f"Booster amount must be positive, got {amount}")
        if state.is_over:
            raise RuntimeError(f"Cannot extend budgets of a finished session ({state.status.name})")
        return state

    def _emit_budget(self, state: GameState) -> None:
        self.event_bus.emit(
            EVENT_BUDGET_CHANGED,
            moves_remaining=state.moves_remaining,
            time_remaining=state.time_remaining,
        )

    def _check_end_conditions(self) -> None:
        state = self._state()
        if state.score >= state.target_score:
            self._end(GameStatus.COMPLETED, reason="target_reached")
        elif state.moves_remaining == 0:
            self._end(GameStatus.FAILED, reason="moves")

    def _end(self, status: GameStatus, *, reason: str) -> None:
        state = self._state()
        logger.info("Session ended: %s (%s) with score %d", status.name, reason, state.score)
        set_game_status(self.world, self.event_bus, status)
        self.event_bus.emit(EVENT_SESSION_ENDED, status=status, score=state.score, reason=reason)

    def _state(self) -> GameState:
        state = get_game_state(self.world)
        if state is None:
            raise RuntimeError("GameState not found")
        return state
