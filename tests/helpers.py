from __future__ import annotations

import itertools
import random
from typing import Iterable, Sequence

from esper import World

from gemrush.components.game_state import GameStatus
from gemrush.components.tile import Tile
from gemrush.components.tile_types import TileKind
from gemrush.config import SessionConfig
from gemrush.systems.board_ops import get_board
from gemrush.world import create_world

KINDS = list(TileKind)
# Kinds the filler pattern never uses, so any run on a filled board comes from the test itself.
X = TileKind.PEARL
Y = TileKind.ONYX


def filler_kind(row: int, col: int) -> TileKind:
    """Match-free background: neighbours along a row differ by 1, along a column by 2 (mod 5)."""
    return KINDS[(col + 2 * row) % 5]


def fill_board(world: World) -> None:
    board = get_board(world)
    board.cells = [
        [Tile(kind=filler_kind(row, col)) for col in range(board.cols)]
        for row in range(board.rows)
    ]


def set_row(world: World, row: int, kinds: Sequence[TileKind | None], start_col: int = 0) -> None:
    board = get_board(world)
    for offset, kind in enumerate(kinds):
        board.set((row, start_col + offset), Tile(kind=kind) if kind is not None else None)


def make_world(
    *,
    rows: int = 8,
    cols: int = 8,
    type_count: int = 7,
    status: GameStatus = GameStatus.PLAYING,
    seed: int = 0,
    filled: bool = True,
) -> World:
    config = SessionConfig(rows=rows, cols=cols, type_count=type_count, seed=seed)
    world = create_world(config, initial_status=status)
    if filled:
        fill_board(world)
    return world


class ScriptedRandom(random.Random):
    """Random whose choice() replays a fixed sequence of tile kinds, cycling when exhausted."""

    def __init__(self, kinds: Iterable[TileKind]):
        super().__init__(0)
        self._script = itertools.cycle(list(kinds))
        self.calls = 0

    def choice(self, seq):
        kind = next(self._script)
        assert kind in seq, f"{kind} not spawnable in {seq}"
        self.calls += 1
        return kind
