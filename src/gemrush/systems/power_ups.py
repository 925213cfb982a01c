from __future__ import annotations

from typing import Optional, Tuple

from gemrush.components.match_group import MatchGroup
from gemrush.components.tile import Tile
from gemrush.components.tile_types import SpecialEffect
from gemrush.constants import AREA_CLEAR_MIN_SIZE, COLOR_CLEAR_SIZE, LINE_CLEAR_SIZE

Position = Tuple[int, int]


def effect_for_size(size: int) -> Optional[SpecialEffect]:
    if size >= AREA_CLEAR_MIN_SIZE:
        return SpecialEffect.AREA_CLEAR
    if size == COLOR_CLEAR_SIZE:
        return SpecialEffect.COLOR_CLEAR
    if size == LINE_CLEAR_SIZE:
        return SpecialEffect.LINE_CLEAR
    return None


def maybe_create(group: MatchGroup) -> Optional[Tile]:
    """Return the power-up earned by a match group, or None for plain three-matches.

    The power-up keeps the group's kind; a line clear also remembers the axis
    of the group so it clears that same line when activated.
    """
    effect = effect_for_size(len(group))
    if effect is None:
        return None
    axis = group.axis if effect is SpecialEffect.LINE_CLEAR else None
    return Tile(kind=group.kind, special=effect, axis=axis)


def midpoint(group: MatchGroup) -> Position:
    """Cell a power-up lands in: index len // 2 along the group (the later of the two middles for even lengths)."""
    return group.positions[len(group) // 2]
