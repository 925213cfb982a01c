import random

from esper import World
from gemrush.components.board import Board
from gemrush.components.game_state import GameState, GameStatus
from gemrush.components.tile_type_registry import TileTypeRegistry
from gemrush.components.tile_types import TileTypes, first_kinds
from gemrush.components.turn_state import TurnState
from gemrush.config import SessionConfig
from gemrush.systems.board_ops import initialize_board


def create_world(
    config: SessionConfig | None = None,
    *,
    initial_status: GameStatus = GameStatus.PLAYING,
    rng: random.Random | None = None,
) -> World:
    """Build the session state: tile registry, game/turn state and a settled board."""
    config = config or SessionConfig()
    world = World()
    setattr(world, "random", rng or random.Random(config.seed))

    # Single registry entity with the kinds this session spawns.
    world.create_entity(
        TileTypeRegistry(),
        TileTypes(spawnable=first_kinds(config.type_count)),
    )

    world.create_entity(
        GameState(
            status=initial_status,
            target_score=config.target_score,
            move_limit=config.move_limit,
            time_remaining=config.time_limit,
        ),
        TurnState(),
    )

    world.create_entity(Board(rows=config.rows, cols=config.cols))
    initialize_board(world)
    return world
