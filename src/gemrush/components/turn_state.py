from dataclasses import dataclass


@dataclass(slots=True)
class TurnState:
    """Tracks the move currently being resolved."""

    in_flight: bool = False
    cascade_active: bool = False
    cascade_depth: int = 0
