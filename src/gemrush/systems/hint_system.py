from __future__ import annotations

import random
from typing import List, Optional, Tuple

from esper import World

from gemrush.systems.board_ops import find_valid_swaps, get_board

Position = Tuple[int, int]
Swap = Tuple[Position, Position]


class HintSystem:
    """Read-only helper that suggests productive swaps."""

    def __init__(self, world: World, rng: Optional[random.Random] = None) -> None:
        self.world = world
        self.random = rng or random.Random()

    def valid_swaps(self) -> List[Swap]:
        return find_valid_swaps(get_board(self.world))

    def hint(self) -> Optional[Swap]:
        """First productive swap in row-major order, or None if the board is stuck."""
        swaps = self.valid_swaps()
        return swaps[0] if swaps else None

    def random_swap(self) -> Optional[Swap]:
        swaps = self.valid_swaps()
        if not swaps:
            return None
        return self.random.choice(swaps)
