"""Session state resource describing where the current game stands."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class GameStatus(Enum):
    """Session lifecycle. RESOLVING only exists while a move is being resolved."""
    IDLE = auto()
    PLAYING = auto()
    RESOLVING = auto()
    COMPLETED = auto()
    FAILED = auto()


@dataclass
class GameState:
    """Singleton component storing score and budgets for one session."""
    status: GameStatus = GameStatus.IDLE
    score: int = 0
    target_score: int = 0
    moves_used: int = 0
    move_limit: Optional[int] = None
    time_remaining: Optional[float] = None
    last_cascade_depth: int = 0
    level: int = 1
    # Score carried over from completed levels.
    banked_score: int = 0

    @property
    def moves_remaining(self) -> Optional[int]:
        if self.move_limit is None:
            return None
        return max(0, self.move_limit - self.moves_used)

    @property
    def total_score(self) -> int:
        return self.banked_score + self.score

    @property
    def is_over(self) -> bool:
        return self.status in (GameStatus.COMPLETED, GameStatus.FAILED)
