from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List


class TileKind(Enum):
    """Closed set of ordinary tile kinds. Sessions spawn the first ``type_count`` of them."""
    RUBY = "ruby"
    SAPPHIRE = "sapphire"
    EMERALD = "emerald"
    TOPAZ = "topaz"
    AMETHYST = "amethyst"
    PEARL = "pearl"
    ONYX = "onyx"


class SpecialEffect(Enum):
    LINE_CLEAR = "line_clear"
    COLOR_CLEAR = "color_clear"
    AREA_CLEAR = "area_clear"


class Axis(Enum):
    ROW = "row"
    COLUMN = "column"


def first_kinds(count: int) -> List[TileKind]:
    kinds = list(TileKind)
    if not 1 <= count <= len(kinds):
        raise ValueError(f"type_count must be between 1 and {len(kinds)}, got {count}")
    return kinds[:count]


@dataclass(slots=True)
class TileTypes:
    """Tile kinds the board may spawn, stored on the registry entity.

    This component lives alongside TileTypeRegistry (tag). Order is preserved so
    seeded generation stays reproducible.
    """
    spawnable: List[TileKind] = field(default_factory=lambda: list(TileKind))

    def __post_init__(self) -> None:
        self.spawnable = self._dedupe(self.spawnable) or list(TileKind)

    def spawnable_types(self) -> List[TileKind]:
        return list(self.spawnable)

    def set_spawnable(self, kinds: Iterable[TileKind]) -> None:
        filtered = self._dedupe(kinds)
        if not filtered:
            raise ValueError("At least one spawnable tile kind is required")
        self.spawnable = filtered

    @staticmethod
    def _dedupe(kinds: Iterable[TileKind]) -> List[TileKind]:
        seen: set[TileKind] = set()
        filtered: List[TileKind] = []
        for kind in kinds:
            if kind not in seen:
                filtered.append(kind)
                seen.add(kind)
        return filtered
