from __future__ import annotations

from typing import List, Protocol, Tuple

from gemrush.components.board import Board
from gemrush.components.game_state import GameStatus
from gemrush.components.match_group import MatchGroup
from gemrush.components.tile_types import SpecialEffect
from gemrush.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_MATCH_RESOLVED,
    EVENT_POWER_UP_CREATED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_ENDED,
    EventBus,
)

Position = Tuple[int, int]


class Renderer(Protocol):
    """Interface a presentation layer implements to follow the engine."""

    def on_board_changed(self, board: Board) -> None:
        ...

    def on_match(self, groups_by_depth: List[List[MatchGroup]]) -> None:
        ...

    def on_score_changed(self, delta: int, total: int) -> None:
        ...

    def on_power_up_created(self, position: Position, effect: SpecialEffect) -> None:
        ...

    def on_session_ended(self, status: GameStatus) -> None:
        ...


class RendererBridgeSystem:
    """Forwards engine events to a Renderer's callbacks."""

    def __init__(self, event_bus: EventBus, renderer: Renderer) -> None:
        self.event_bus = event_bus
        self.renderer = renderer
        event_bus.subscribe(EVENT_BOARD_CHANGED, self._on_board_changed)
        event_bus.subscribe(EVENT_MATCH_RESOLVED, self._on_match_resolved)
        event_bus.subscribe(EVENT_SCORE_CHANGED, self._on_score_changed)
        event_bus.subscribe(EVENT_POWER_UP_CREATED, self._on_power_up_created)
        event_bus.subscribe(EVENT_SESSION_ENDED, self._on_session_ended)

    def detach(self) -> None:
        self.event_bus.unsubscribe(EVENT_BOARD_CHANGED, self._on_board_changed)
        self.event_bus.unsubscribe(EVENT_MATCH_RESOLVED, self._on_match_resolved)
        self.event_bus.unsubscribe(EVENT_SCORE_CHANGED, self._on_score_changed)
        self.event_bus.unsubscribe(EVENT_POWER_UP_CREATED, self._on_power_up_created)
        self.event_bus.unsubscribe(EVENT_SESSION_ENDED, self._on_session_ended)

    def _on_board_changed(self, sender, **payload) -> None:
        board = payload.get("board")
        if board is not None:
            self.renderer.on_board_changed(board)

    def _on_match_resolved(self, sender, **payload) -> None:
        self.renderer.on_match(payload.get("groups_by_depth", []))

    def _on_score_changed(self, sender, **payload) -> None:
        self.renderer.on_score_changed(payload["delta"], payload["total"])

    def _on_power_up_created(self, sender, **payload) -> None:
        self.renderer.on_power_up_created(payload["position"], payload["effect"])

    def _on_session_ended(self, sender, **payload) -> None:
        self.renderer.on_session_ended(payload["status"])
