import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from esper import World

from gemrush.components.board import Board
from gemrush.components.cascade_outcome import CascadeOutcome
from gemrush.components.match_group import MatchGroup
from gemrush.components.tile import Tile
from gemrush.constants import MAX_CASCADE_DEPTH
from gemrush.events.bus import (
    EventBus,
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_SHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_RESOLVED,
    EVENT_POWER_UP_CREATED,
    EVENT_REFILL_COMPLETED,
)
from gemrush.systems.board_ops import (
    apply_gravity,
    clear_positions,
    find_valid_swaps,
    get_board,
    get_rng,
    get_tile_registry,
    refill_empty_cells,
    shuffle_board,
)
from gemrush.systems.match import find_matches
from gemrush.systems.power_ups import maybe_create, midpoint
from gemrush.systems.scoring import score_for
from gemrush.systems.turn_state_utils import get_or_create_turn_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class MatchResolutionSystem:
    """Runs the remove -> gravity -> refill -> rescan loop after a committed move.

    Resolution is synchronous: the whole cascade is played out before
    ``resolve`` returns, and the returned CascadeOutcome is the trace a
    presentation layer replays. Events are emitted along the way for
    listeners that prefer to follow each step.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        max_depth: int = MAX_CASCADE_DEPTH,
        reshuffle_on_stalemate: bool = True,
    ):
        self.world = world
        self.event_bus = event_bus
        self.max_depth = max_depth
        self.reshuffle_on_stalemate = reshuffle_on_stalemate

    def resolve(
        self,
        initial_matches: Sequence[MatchGroup],
        *,
        cleared: Iterable[Position] = (),
        bonus: int = 0,
        source: str = "swap",
    ) -> CascadeOutcome:
        """Resolve ``initial_matches`` (and any extra ``cleared`` cells) until the board settles.

        ``bonus`` is added to the depth-0 score; power-up activations use it
        for their per-tile reward. Stops early once ``max_depth`` cascade
        levels have been resolved, leaving the remaining matches on the board.
        """
        board = get_board(self.world)
        state = get_or_create_turn_state(self.world)
        state.cascade_active = True
        outcome = CascadeOutcome()
        depth = 0
        groups = list(initial_matches)
        extra = list(cleared)
        try:
            while True:
                state.cascade_depth = depth
                step_score = score_for(groups, depth) + (bonus if depth == 0 else 0)
                outcome.groups_by_depth.append(groups)
                outcome.score_by_depth.append(step_score)
                outcome.score_delta += step_score
                self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, groups=groups, score=step_score)
                logger.debug("Cascade depth %d: %d group(s), %d point(s)", depth, len(groups), step_score)

                outcome.power_ups_created.extend(self._remove(board, groups, extra, depth))
                self._settle(board, depth)

                next_groups = find_matches(board)
                if not next_groups:
                    break
                if depth >= self.max_depth:
                    outcome.capped = True
                    logger.warning(
                        "Cascade stopped at depth cap %d with %d pending group(s)",
                        self.max_depth,
                        len(next_groups),
                    )
                    break
                depth += 1
                groups = next_groups
                extra = []
        finally:
            state.cascade_active = False
            state.cascade_depth = 0
        outcome.cascade_depth = depth

        if not outcome.capped and self.reshuffle_on_stalemate:
            self._reshuffle_if_stuck(board)

        self.event_bus.emit(EVENT_MATCH_RESOLVED, groups_by_depth=outcome.groups_by_depth)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, outcome=outcome, source=source)
        return outcome

    def _remove(
        self,
        board: Board,
        groups: List[MatchGroup],
        extra: List[Position],
        depth: int,
    ) -> List[Position]:
        # Power-ups are decided before clearing and written back afterwards so
        # each one survives the match that created it. Crossing groups can share
        # a midpoint; the later group wins that cell.
        pending: Dict[Position, Tile] = {}
        for group in groups:
            tile = maybe_create(group)
            if tile is not None:
                pending[midpoint(group)] = tile

        positions = sorted({pos for group in groups for pos in group.positions} | set(extra))
        removed = clear_positions(board, positions)
        self.event_bus.emit(
            EVENT_MATCH_CLEARED,
            depth=depth,
            positions=[pos for pos, _ in removed],
        )

        created: List[Position] = []
        for pos, tile in pending.items():
            board.set(pos, tile)
            created.append(pos)
            self.event_bus.emit(EVENT_POWER_UP_CREATED, position=pos, effect=tile.special)
        return created

    def _settle(self, board: Board, depth: int) -> None:
        moves = apply_gravity(board)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, depth=depth, moves=moves)
        kinds = get_tile_registry(self.world).spawnable_types()
        new_tiles = refill_empty_cells(board, kinds, get_rng(self.world))
        self.event_bus.emit(EVENT_REFILL_COMPLETED, depth=depth, new_tiles=new_tiles)
        self.event_bus.emit(EVENT_BOARD_CHANGED, board=board, reason="cascade")

    def _reshuffle_if_stuck(self, board: Board) -> None:
        if find_valid_swaps(board):
            return
        logger.warning("No valid swaps left, reshuffling board")
        kinds = get_tile_registry(self.world).spawnable_types()
        regenerated = shuffle_board(board, kinds, get_rng(self.world))
        self.event_bus.emit(EVENT_BOARD_SHUFFLED, regenerated=regenerated)
        self.event_bus.emit(EVENT_BOARD_CHANGED, board=board, reason="shuffle")
