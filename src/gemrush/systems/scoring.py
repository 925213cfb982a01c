"""Score computation for resolved match groups.

Two multiplier formulas exist in earlier versions of the game (``1.5 ** depth``
and ``1 + 0.5 * depth``). The linear one is used everywhere here, including
any multiplier shown to the player, via :func:`cascade_multiplier`.
"""
from __future__ import annotations

import math
from typing import Iterable

from gemrush.components.match_group import MatchGroup
from gemrush.constants import CASCADE_MULTIPLIER_STEP, LONG_MATCH_STEP, MATCH_SCORES, MIN_MATCH


def base_score(size: int) -> int:
    if size < MIN_MATCH:
        return 0
    if size in MATCH_SCORES:
        return MATCH_SCORES[size]
    longest = max(MATCH_SCORES)
    return MATCH_SCORES[longest] + LONG_MATCH_STEP * (size - longest)


def cascade_multiplier(depth: int) -> float:
    if depth < 0:
        raise ValueError(f"cascade depth cannot be negative, got {depth}")
    return 1 + CASCADE_MULTIPLIER_STEP * depth


def score_for(groups: Iterable[MatchGroup], cascade_depth: int) -> int:
    """Sum the base scores of every group found at one depth, then apply the multiplier.

    Groups that share a cell (row and column runs crossing) each count in full.
    """
    total = sum(base_score(len(group)) for group in groups)
    return math.floor(total * cascade_multiplier(cascade_depth))
