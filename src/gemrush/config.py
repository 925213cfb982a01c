from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gemrush.components.tile_types import TileKind
from gemrush.constants import (
    DEFAULT_MOVE_LIMIT,
    DEFAULT_TARGET_SCORE,
    GRID_COLS,
    GRID_ROWS,
    MIN_MATCH,
    TILE_KIND_COUNT,
)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Parameters supplied by the caller when a session is created.

    ``move_limit`` and ``time_limit`` are independent budgets; either may be
    None to disable it. The engine never reads these from storage itself.
    """
    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    type_count: int = TILE_KIND_COUNT
    target_score: int = DEFAULT_TARGET_SCORE
    move_limit: Optional[int] = DEFAULT_MOVE_LIMIT
    time_limit: Optional[float] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rows < MIN_MATCH or self.cols < MIN_MATCH:
            raise ValueError(
                f"Board must be at least {MIN_MATCH}x{MIN_MATCH}, got {self.rows}x{self.cols}"
            )
        # Fewer than three kinds leaves cells with no kind that avoids a run.
        if not MIN_MATCH <= self.type_count <= len(TileKind):
            raise ValueError(
                f"type_count must be between {MIN_MATCH} and {len(TileKind)}, got {self.type_count}"
            )
        if self.target_score <= 0:
            raise ValueError("target_score must be positive")
        if self.move_limit is not None and self.move_limit <= 0:
            raise ValueError("move_limit must be positive when set")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive when set")
