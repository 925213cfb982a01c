from dataclasses import dataclass
from typing import Optional

from gemrush.components.tile_types import Axis, SpecialEffect, TileKind


@dataclass(frozen=True, slots=True)
class Tile:
    """Content of one board cell.

    Tiles carry no identity; position is implied by the cell holding them.
    ``axis`` is only set on line-clear tiles and names the line they clear.
    """
    kind: TileKind
    special: Optional[SpecialEffect] = None
    axis: Optional[Axis] = None

    @property
    def is_special(self) -> bool:
        return self.special is not None
