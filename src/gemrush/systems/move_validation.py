from typing import Tuple

from esper import World

from gemrush.components.cascade_outcome import MoveResult
from gemrush.components.game_state import GameStatus
from gemrush.events.bus import (
    EventBus,
    EVENT_BOARD_CHANGED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from gemrush.systems.board_ops import get_board
from gemrush.systems.match import find_matches
from gemrush.systems.match_resolution import MatchResolutionSystem
from gemrush.systems.turn_state_utils import get_or_create_turn_state
from gemrush.utils.game_state import get_game_state

Position = Tuple[int, int]


class MoveValidationSystem:
    """Checks a requested swap, commits or reverts it, and hands commits to cascade resolution."""

    def __init__(self, world: World, event_bus: EventBus, resolver: MatchResolutionSystem):
        self.world = world
        self.event_bus = event_bus
        self.resolver = resolver
        self.last_result: MoveResult | None = None
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        ar, ac = a
        br, bc = b
        return abs(ar - br) + abs(ac - bc) == 1

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.last_result = self.try_move(src, dst)

    def try_move(self, src: Position, dst: Position) -> MoveResult:
        """Attempt the swap of ``src`` and ``dst``.

        Rejected moves leave the board exactly as it was. Out-of-range
        coordinates raise IndexError.
        """
        board = get_board(self.world)
        board.require(src)
        board.require(dst)
        if not self.is_adjacent(src, dst):
            return self._reject(src, dst, "not_adjacent")
        state = get_game_state(self.world)
        if state is not None and state.status is not GameStatus.PLAYING:
            return self._reject(src, dst, "inactive")
        turn = get_or_create_turn_state(self.world)
        if turn.in_flight:
            return self._reject(src, dst, "busy")

        turn.in_flight = True
        try:
            board.swap(src, dst)
            matches = find_matches(board)
            if not matches:
                board.swap(src, dst)
                return self._reject(src, dst, "no_match")
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
            self.event_bus.emit(EVENT_BOARD_CHANGED, board=board, reason="swap")
            outcome = self.resolver.resolve(matches, source="swap")
        finally:
            turn.in_flight = False
        return MoveResult(accepted=True, reason="accepted", outcome=outcome)

    def _reject(self, src: Position, dst: Position, reason: str) -> MoveResult:
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
        return MoveResult(accepted=False, reason=reason)
