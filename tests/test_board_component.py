import pytest

from gemrush.components.board import Board
from gemrush.components.tile import Tile
from gemrush.components.tile_types import TileKind


def test_new_board_is_empty():
    board = Board(rows=3, cols=4)
    assert len(board.empty_positions()) == 12
    assert not board.is_full()


def test_swap_exchanges_cells_without_validation():
    board = Board(rows=3, cols=3)
    ruby = Tile(kind=TileKind.RUBY)
    onyx = Tile(kind=TileKind.ONYX)
    board.set((0, 0), ruby)
    board.set((2, 2), onyx)
    board.swap((0, 0), (2, 2))
    assert board.get((0, 0)) == onyx
    assert board.get((2, 2)) == ruby


@pytest.mark.parametrize("pos", [(-1, 0), (0, -1), (3, 0), (0, 3)])
def test_out_of_range_access_raises(pos):
    board = Board(rows=3, cols=3)
    with pytest.raises(IndexError):
        board.get(pos)
    with pytest.raises(IndexError):
        board.set(pos, Tile(kind=TileKind.RUBY))
    with pytest.raises(IndexError):
        board.swap((0, 0), pos)


def test_mismatched_grid_rejected():
    with pytest.raises(ValueError):
        Board(rows=2, cols=2, cells=[[None, None]])


def test_tile_special_flag():
    assert not Tile(kind=TileKind.PEARL).is_special
