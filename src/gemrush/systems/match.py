from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from gemrush.components.board import Board
from gemrush.components.match_group import MatchGroup
from gemrush.components.tile_types import Axis, TileKind
from gemrush.constants import MIN_MATCH

Position = Tuple[int, int]


def _kind_at(board: Board, pos: Position) -> Optional[TileKind]:
    tile = board.cells[pos[0]][pos[1]]
    if tile is None or tile.is_special:
        return None
    return tile.kind


def _scan_line(board: Board, line: Iterable[Position], axis: Axis) -> List[MatchGroup]:
    """Run-length encode one row or column and emit every run of MIN_MATCH or more.

    Empty cells and special tiles never join a run and always end the current one.
    """
    groups: List[MatchGroup] = []
    run: List[Position] = []
    last_kind: Optional[TileKind] = None
    for pos in line:
        kind = _kind_at(board, pos)
        if kind is not None and kind == last_kind:
            run.append(pos)
            continue
        if len(run) >= MIN_MATCH:
            groups.append(MatchGroup(kind=last_kind, axis=axis, positions=tuple(run)))
        run = [pos] if kind is not None else []
        last_kind = kind
    if len(run) >= MIN_MATCH:
        groups.append(MatchGroup(kind=last_kind, axis=axis, positions=tuple(run)))
    return groups


def find_matches(board: Board) -> List[MatchGroup]:
    """Detect every horizontal and vertical run of length >= MIN_MATCH.

    Rows are scanned left to right first, then columns top to bottom. Row and
    column groups are independent: a cell at a crossing shows up in both and
    is not merged. The board is not modified.
    """
    matches: List[MatchGroup] = []
    for row in range(board.rows):
        matches.extend(_scan_line(board, ((row, col) for col in range(board.cols)), Axis.ROW))
    for col in range(board.cols):
        matches.extend(_scan_line(board, ((row, col) for row in range(board.rows)), Axis.COLUMN))
    return matches


def creates_match_at(board: Board, pos: Position) -> bool:
    """Return True if a horizontal or vertical run of MIN_MATCH passes through pos."""
    kind = _kind_at(board, pos)
    if kind is None:
        return False
    row, col = pos
    # Horizontal sweep
    h_run = 1
    c_left = col - 1
    while c_left >= 0 and _kind_at(board, (row, c_left)) == kind:
        h_run += 1
        c_left -= 1
    c_right = col + 1
    while c_right < board.cols and _kind_at(board, (row, c_right)) == kind:
        h_run += 1
        c_right += 1
    if h_run >= MIN_MATCH:
        return True
    # Vertical sweep
    v_run = 1
    r_up = row - 1
    while r_up >= 0 and _kind_at(board, (r_up, col)) == kind:
        v_run += 1
        r_up -= 1
    r_down = row + 1
    while r_down < board.rows and _kind_at(board, (r_down, col)) == kind:
        v_run += 1
        r_down += 1
    return v_run >= MIN_MATCH
