from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gemrush.components.match_group import MatchGroup

Position = Tuple[int, int]


@dataclass(slots=True)
class CascadeOutcome:
    """Full trace of one cascade resolution.

    Index ``d`` of ``groups_by_depth`` and ``score_by_depth`` describes cascade
    level ``d``; level 0 is the triggering match (or activation). A presentation
    layer can replay the trace at its own pace.

    ``power_ups_created`` holds the creation cell of each power-up: the
    midpoint of its group before gravity runs. A power-up made by a vertical
    match usually falls below that cell in the same step. A cell appears at
    most once per depth.
    """
    score_delta: int = 0
    cascade_depth: int = 0
    groups_by_depth: List[List[MatchGroup]] = field(default_factory=list)
    score_by_depth: List[int] = field(default_factory=list)
    power_ups_created: List[Position] = field(default_factory=list)
    capped: bool = False


@dataclass(slots=True)
class MoveResult:
    accepted: bool
    reason: str
    outcome: Optional[CascadeOutcome] = None
