from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from gemrush.components.tile import Tile

Position = Tuple[int, int]
Snapshot = Tuple[Tuple[Optional[Tile], ...], ...]


@dataclass(slots=True)
class Board:
    """Grid of optional tiles, row-major, row 0 at the top.

    Cells are only empty while a cascade is being resolved. Every accessor is
    bounds-checked; an out-of-range coordinate is a caller bug and raises
    IndexError.
    """
    rows: int
    cols: int
    cells: List[List[Optional[Tile]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.rows}x{self.cols}")
        if not self.cells:
            self.cells = [[None] * self.cols for _ in range(self.rows)]
        elif len(self.cells) != self.rows or any(len(row) != self.cols for row in self.cells):
            raise ValueError("Cell grid does not match board dimensions")

    def in_bounds(self, pos: Position) -> bool:
        row, col = pos
        return 0 <= row < self.rows and 0 <= col < self.cols

    def require(self, pos: Position) -> None:
        if not self.in_bounds(pos):
            raise IndexError(f"Position {pos} outside {self.rows}x{self.cols} board")

    def get(self, pos: Position) -> Optional[Tile]:
        self.require(pos)
        return self.cells[pos[0]][pos[1]]

    def set(self, pos: Position, tile: Optional[Tile]) -> None:
        self.require(pos)
        self.cells[pos[0]][pos[1]] = tile

    def swap(self, a: Position, b: Position) -> None:
        """Exchange two cells in place. No adjacency or match validation."""
        self.require(a)
        self.require(b)
        (ar, ac), (br, bc) = a, b
        self.cells[ar][ac], self.cells[br][bc] = self.cells[br][bc], self.cells[ar][ac]

    def column(self, col: int) -> List[Optional[Tile]]:
        self.require((0, col))
        return [self.cells[row][col] for row in range(self.rows)]

    def positions(self) -> Iterator[Position]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield (row, col)

    def empty_positions(self) -> List[Position]:
        return [pos for pos in self.positions() if self.cells[pos[0]][pos[1]] is None]

    def is_full(self) -> bool:
        return all(tile is not None for row in self.cells for tile in row)

    def snapshot(self) -> Snapshot:
        return tuple(tuple(row) for row in self.cells)
