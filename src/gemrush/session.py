"""Game session facade.

Sets up the ECS world, event bus and engine systems for one game, and exposes
the calls an input layer and a presentation layer need.
"""
from __future__ import annotations

import random
from typing import Optional, Set, Tuple

from gemrush.components.board import Board
from gemrush.components.cascade_outcome import MoveResult
from gemrush.components.game_state import GameState, GameStatus
from gemrush.components.tile import Tile
from gemrush.components.tile_types import TileKind
from gemrush.config import SessionConfig
from gemrush.constants import EXTRA_MOVES, EXTRA_TIME
from gemrush.events.bus import EVENT_TICK, EventBus
from gemrush.systems.board_ops import get_board
from gemrush.systems.game_flow_system import GameFlowSystem
from gemrush.systems.hint_system import HintSystem
from gemrush.systems.match_resolution import MatchResolutionSystem
from gemrush.systems.move_validation import MoveValidationSystem
from gemrush.systems.power_up_activation import PowerUpActivationSystem
from gemrush.systems.renderer_bridge import Renderer, RendererBridgeSystem
from gemrush.systems.scoring import cascade_multiplier
from gemrush.systems.turn_state_utils import get_or_create_turn_state
from gemrush.utils.game_state import get_game_state
from gemrush.world import create_world

Position = Tuple[int, int]


class GameSession:
    """One game: a board, its score and budgets, and the systems acting on them.

    All calls are synchronous. ``try_move`` and ``activate`` are the only
    calls that change the board; everything else is a read.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        renderer: Renderer | None = None,
    ):
        self.config = config or SessionConfig()
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.config, initial_status=GameStatus.IDLE, rng=rng)

        # Engine systems
        self.match_resolution_system = MatchResolutionSystem(self.world, self.event_bus)
        self.move_validation_system = MoveValidationSystem(
            self.world, self.event_bus, self.match_resolution_system
        )
        self.power_up_activation_system = PowerUpActivationSystem(
            self.world, self.event_bus, self.match_resolution_system
        )
        self.hint_system = HintSystem(self.world, rng=getattr(self.world, "random", None))

        # Session systems
        self.game_flow_system = GameFlowSystem(self.world, self.event_bus)

        self.renderer_bridge: RendererBridgeSystem | None = None
        if renderer is not None:
            self.attach_renderer(renderer)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach_renderer(self, renderer: Renderer) -> RendererBridgeSystem:
        if self.renderer_bridge is not None:
            self.renderer_bridge.detach()
        self.renderer_bridge = RendererBridgeSystem(self.event_bus, renderer)
        return self.renderer_bridge

    def start(self) -> None:
        self.game_flow_system.start()

    def restart(self) -> None:
        self.game_flow_system.restart()

    def next_level(self) -> int:
        return self.game_flow_system.next_level()

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def add_moves(self, count: int = EXTRA_MOVES) -> bool:
        return self.game_flow_system.add_moves(count)

    def add_time(self, seconds: float = EXTRA_TIME) -> bool:
        return self.game_flow_system.add_time(seconds)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def try_move(self, src: Position, dst: Position) -> MoveResult:
        return self.move_validation_system.try_move(src, dst)

    def activate(self, pos: Position, *, target_kind: Optional[TileKind] = None) -> Set[Position]:
        return self.power_up_activation_system.activate(pos, target_kind=target_kind)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        return get_board(self.world)

    def get(self, pos: Position) -> Optional[Tile]:
        return self.board.get(pos)

    @property
    def state(self) -> GameState:
        state = get_game_state(self.world)
        if state is None:
            raise RuntimeError("GameState not found")
        return state

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def cascade_depth(self) -> int:
        """Depth of the cascade in progress, or of the last one once it has finished."""
        turn = get_or_create_turn_state(self.world)
        if turn.cascade_active:
            return turn.cascade_depth
        return self.state.last_cascade_depth

    def cascade_multiplier(self) -> float:
        return cascade_multiplier(self.cascade_depth)

    def hint(self) -> Optional[Tuple[Position, Position]]:
        return self.hint_system.hint()
