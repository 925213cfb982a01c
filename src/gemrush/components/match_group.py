from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from gemrush.components.tile_types import Axis, TileKind

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """A run of three or more same-kind tiles along one axis.

    Positions are ordered along the axis (left to right, or top to bottom).
    A cell may belong to one row group and one column group at the same time.
    """
    kind: TileKind
    axis: Axis
    positions: Tuple[Position, ...]

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, pos: object) -> bool:
        return pos in self.positions
