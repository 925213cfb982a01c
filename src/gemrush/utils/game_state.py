from __future__ import annotations

from esper import World

from gemrush.components.game_state import GameState, GameStatus
from gemrush.events.bus import EVENT_GAME_STATUS_CHANGED, EventBus


def get_game_state(world: World) -> GameState | None:
    for _, state in world.get_component(GameState):
        return state
    return None


def set_game_status(world: World, event_bus: EventBus, status: GameStatus) -> None:
    """Update the session status and emit a change event when it differs."""

    state = get_game_state(world)
    if state is None:
        raise RuntimeError("GameState not found")
    previous_status = state.status
    if previous_status == status:
        return
    state.status = status
    event_bus.emit(
        EVENT_GAME_STATUS_CHANGED,
        previous_status=previous_status,
        new_status=status,
    )
