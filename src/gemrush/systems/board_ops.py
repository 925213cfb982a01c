from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from esper import World

from gemrush.components.board import Board
from gemrush.components.tile import Tile
from gemrush.components.tile_type_registry import TileTypeRegistry
from gemrush.components.tile_types import TileKind, TileTypes
from gemrush.constants import MIN_MATCH, SHUFFLE_ATTEMPTS
from gemrush.systems.match import creates_match_at, find_matches

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    tile: Tile


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def set_spawnable_tile_types(world: World, kinds: Iterable[TileKind]) -> List[TileKind]:
    registry = get_tile_registry(world)
    registry.set_spawnable(kinds)
    return registry.spawnable_types()


def get_rng(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if isinstance(rng, random.Random):
        return rng
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def _ordinary_kind(tile: Optional[Tile]) -> Optional[TileKind]:
    if tile is None or tile.is_special:
        return None
    return tile.kind


def safe_kinds(layout: Sequence[Sequence[Optional[Tile]]], row: int, col: int,
               kinds: Sequence[TileKind]) -> List[TileKind]:
    """Kinds that do not complete a run with the two cells left of or above (row, col)."""
    available = list(kinds)
    if col >= 2:
        left1 = _ordinary_kind(layout[row][col - 1])
        left2 = _ordinary_kind(layout[row][col - 2])
        if left1 is not None and left1 == left2:
            available = [kind for kind in available if kind != left1]
    if row >= 2:
        up1 = _ordinary_kind(layout[row - 1][col])
        up2 = _ordinary_kind(layout[row - 2][col])
        if up1 is not None and up1 == up2:
            available = [kind for kind in available if kind != up1]
    return available


def generate_layout(rows: int, cols: int, kinds: Sequence[TileKind],
                    rng: random.Random) -> List[List[Optional[Tile]]]:
    """Fill a fresh grid so that no run of MIN_MATCH identical kinds exists.

    Each cell draws only from kinds that cannot complete a run with its
    already placed left/upper neighbours, so at most two kinds are ever
    excluded and no retry loop is needed.
    """
    if len(kinds) < MIN_MATCH:
        raise ValueError(f"At least {MIN_MATCH} tile kinds are needed to avoid initial matches")
    layout: List[List[Optional[Tile]]] = [[None] * cols for _ in range(rows)]
    for row in range(rows):
        for col in range(cols):
            layout[row][col] = Tile(kind=rng.choice(safe_kinds(layout, row, col, kinds)))
    return layout


def initialize_board(world: World) -> Board:
    board = get_board(world)
    kinds = get_tile_registry(world).spawnable_types()
    board.cells = generate_layout(board.rows, board.cols, kinds, get_rng(world))
    if not find_valid_swaps(board):
        logger.info("Generated board has no valid swap, reshuffling")
        shuffle_board(board, kinds, get_rng(world))
    return board


def clear_positions(board: Board, positions: Iterable[Position]) -> List[Tuple[Position, Tile]]:
    """Empty every listed cell; returns the tiles that were actually removed."""
    removed: List[Tuple[Position, Tile]] = []
    for pos in positions:
        tile = board.get(pos)
        if tile is None:
            continue
        board.set(pos, None)
        removed.append((pos, tile))
    return removed


def compute_gravity_moves(board: Board) -> List[GravityMove]:
    moves: List[GravityMove] = []
    for col in range(board.cols):
        filled_rows = [row for row in range(board.rows) if board.cells[row][col] is not None]
        offset = board.rows - len(filled_rows)
        for index, original_row in enumerate(filled_rows):
            target_row = offset + index
            if target_row == original_row:
                continue
            moves.append(GravityMove(
                source=(original_row, col),
                target=(target_row, col),
                tile=board.cells[original_row][col],
            ))
    return moves


def apply_gravity_moves(board: Board, moves: List[GravityMove]) -> None:
    # Targets are always at or below their sources, so walk bottom-up.
    for move in sorted(moves, key=lambda m: m.target[0], reverse=True):
        board.set(move.source, None)
        board.set(move.target, move.tile)


def apply_gravity(board: Board) -> List[GravityMove]:
    """Compact every column downward, keeping the top-to-bottom order of its tiles."""
    moves = compute_gravity_moves(board)
    if moves:
        apply_gravity_moves(board, moves)
    return moves


def refill_empty_cells(board: Board, kinds: Sequence[TileKind], rng: random.Random) -> List[Position]:
    """Give every empty cell a random kind.

    Unlike generate_layout there is no run avoidance here; runs formed by new
    tiles are picked up by the next scan as a further cascade level.
    """
    spawned: List[Position] = []
    for pos in board.empty_positions():
        board.set(pos, Tile(kind=rng.choice(list(kinds))))
        spawned.append(pos)
    return spawned


def predict_swap_creates_match(board: Board, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would create a match. The board is left unchanged."""
    if board.get(src) is None or board.get(dst) is None:
        return False
    board.swap(src, dst)
    try:
        return creates_match_at(board, src) or creates_match_at(board, dst)
    finally:
        board.swap(src, dst)


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match, in row-major order."""
    swaps: List[Tuple[Position, Position]] = []
    for row in range(board.rows):
        for col in range(board.cols):
            pos = (row, col)
            right = (row, col + 1)
            if col + 1 < board.cols and predict_swap_creates_match(board, pos, right):
                swaps.append((pos, right))
            down = (row + 1, col)
            if row + 1 < board.rows and predict_swap_creates_match(board, pos, down):
                swaps.append((pos, down))
    return swaps


def _is_playable(board: Board) -> bool:
    return not find_matches(board) and bool(find_valid_swaps(board))


def shuffle_board(
    board: Board,
    kinds: Sequence[TileKind],
    rng: random.Random,
    *,
    max_attempts: int = SHUFFLE_ATTEMPTS,
) -> bool:
    """Rearrange ordinary tiles until the board has no matches and at least one valid swap.

    Power-ups keep their cells. When shuffling keeps failing, the ordinary
    cells are regenerated from scratch. Returns True if a regeneration was needed.
    """
    ordinary = [pos for pos in board.positions() if not _is_special_at(board, pos)]
    tiles = [board.get(pos) for pos in ordinary]
    for _ in range(max_attempts):
        rng.shuffle(tiles)
        for pos, tile in zip(ordinary, tiles):
            board.set(pos, tile)
        if _is_playable(board):
            return False

    logger.warning("Shuffle failed after %d attempts, regenerating board", max_attempts)
    specials = [(pos, board.get(pos)) for pos in board.positions() if _is_special_at(board, pos)]
    for _ in range(max_attempts):
        board.cells = generate_layout(board.rows, board.cols, kinds, rng)
        # A special tile never extends a run, so dropping it back in cannot create one.
        for pos, tile in specials:
            board.set(pos, tile)
        if find_valid_swaps(board):
            return True
    raise RuntimeError("Unable to regenerate board with a valid swap")


def _is_special_at(board: Board, pos: Position) -> bool:
    tile = board.get(pos)
    return tile is not None and tile.is_special
