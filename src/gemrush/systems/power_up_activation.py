from __future__ import annotations

from collections import Counter
from typing import Optional, Set, Tuple

from esper import World

from gemrush.components.board import Board
from gemrush.components.cascade_outcome import CascadeOutcome
from gemrush.components.game_state import GameStatus
from gemrush.components.tile import Tile
from gemrush.components.tile_types import Axis, SpecialEffect, TileKind
from gemrush.constants import ACTIVATION_TILE_SCORES, AREA_CLEAR_RADIUS
from gemrush.events.bus import EVENT_POWER_UP_ACTIVATED, EventBus
from gemrush.systems.board_ops import get_board
from gemrush.systems.match_resolution import MatchResolutionSystem
from gemrush.systems.turn_state_utils import get_or_create_turn_state
from gemrush.utils.game_state import get_game_state

Position = Tuple[int, int]


class PowerUpActivationSystem:
    """Resolves a triggered special tile into the set of cells it clears.

    The cleared cells are fed through the same remove/gravity/refill/rescan
    pipeline as an ordinary match.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        resolver: MatchResolutionSystem,
        *,
        area_radius: int = AREA_CLEAR_RADIUS,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.resolver = resolver
        self.area_radius = area_radius
        self.last_outcome: Optional[CascadeOutcome] = None

    def activate(self, pos: Position, *, target_kind: Optional[TileKind] = None) -> Set[Position]:
        """Trigger the power-up at ``pos`` and return the cells it cleared.

        ``target_kind`` only matters for color clears and defaults to the
        most common ordinary kind on the board. Raises ValueError if ``pos`` holds no power-up,
        and RuntimeError if the session cannot accept it right now.
        """
        board = get_board(self.world)
        tile = board.get(pos)
        if tile is None or not tile.is_special:
            raise ValueError(f"No power-up at {pos}")
        state = get_game_state(self.world)
        if state is not None and state.status is not GameStatus.PLAYING:
            raise RuntimeError(f"Cannot activate a power-up while the session is {state.status.name}")
        turn = get_or_create_turn_state(self.world)
        if turn.in_flight:
            raise RuntimeError("Another move is still being resolved")

        cleared = self.affected_positions(board, pos, tile, target_kind=target_kind)
        bonus = len(cleared) * ACTIVATION_TILE_SCORES[tile.special.value]
        self.event_bus.emit(
            EVENT_POWER_UP_ACTIVATED,
            position=pos,
            effect=tile.special,
            cleared=cleared,
        )
        turn.in_flight = True
        try:
            self.last_outcome = self.resolver.resolve(
                [],
                cleared=cleared,
                bonus=bonus,
                source="power_up",
            )
        finally:
            turn.in_flight = False
        return cleared

    def affected_positions(
        self,
        board: Board,
        pos: Position,
        tile: Tile,
        *,
        target_kind: Optional[TileKind] = None,
    ) -> Set[Position]:
        """Occupied cells the power-up at ``pos`` would clear, itself included."""
        row, col = pos
        if tile.special is SpecialEffect.LINE_CLEAR:
            if tile.axis is Axis.COLUMN:
                candidates = {(r, col) for r in range(board.rows)}
            else:
                candidates = {(row, c) for c in range(board.cols)}
        elif tile.special is SpecialEffect.AREA_CLEAR:
            radius = self.area_radius
            candidates = {
                (r, c)
                for r in range(row - radius, row + radius + 1)
                for c in range(col - radius, col + radius + 1)
                if board.in_bounds((r, c))
            }
        elif tile.special is SpecialEffect.COLOR_CLEAR:
            kind = target_kind or self.most_common_kind(board)
            candidates = {
                cell
                for cell in board.positions()
                if self._is_ordinary_of_kind(board.get(cell), kind)
            }
            candidates.add(pos)
        else:
            raise ValueError(f"Unsupported special effect {tile.special!r}")
        return {cell for cell in candidates if board.get(cell) is not None}

    @staticmethod
    def most_common_kind(board: Board) -> Optional[TileKind]:
        """Most frequent ordinary kind; ties go to the kind met first in row-major order."""
        counts = Counter(
            tile.kind
            for tile in (board.get(cell) for cell in board.positions())
            if tile is not None and not tile.is_special
        )
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    @staticmethod
    def _is_ordinary_of_kind(tile: Optional[Tile], kind: TileKind) -> bool:
        return tile is not None and not tile.is_special and tile.kind == kind
