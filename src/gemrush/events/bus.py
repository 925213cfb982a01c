from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems nobody else holds a reference to.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# MOVES
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c), reason=str


# ============================================================================
# BOARD & CASCADE
# ============================================================================
EVENT_BOARD_CHANGED = "board_changed"              # payload: board=Board, reason=str
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, groups=list[MatchGroup], score=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: depth=int, positions=list[(r,c)]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: depth=int, moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: depth=int, new_tiles=list[(r,c)]
EVENT_MATCH_RESOLVED = "match_resolved"            # payload: groups_by_depth=list[list[MatchGroup]]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: outcome=CascadeOutcome, source=str
EVENT_BOARD_SHUFFLED = "board_shuffled"            # payload: regenerated=bool


# ============================================================================
# POWER-UPS
# ============================================================================
EVENT_POWER_UP_CREATED = "power_up_created"        # payload: position=(r,c) creation cell, before gravity; effect=SpecialEffect
EVENT_POWER_UP_ACTIVATED = "power_up_activated"    # payload: position=(r,c), effect=SpecialEffect, cleared=set[(r,c)]


# ============================================================================
# SESSION
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: delta=int, total=int
EVENT_GAME_STATUS_CHANGED = "game_status_changed"  # payload: previous_status=GameStatus, new_status=GameStatus
EVENT_SESSION_ENDED = "session_ended"              # payload: status=GameStatus, score=int, reason=str
EVENT_LEVEL_CHANGED = "level_changed"              # payload: level=int, target_score=int
EVENT_BUDGET_CHANGED = "budget_changed"            # payload: moves_remaining=int|None, time_remaining=float|None
