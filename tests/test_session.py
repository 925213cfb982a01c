from gemrush.components.game_state import GameStatus
from gemrush.components.tile import Tile
from gemrush.components.tile_types import Axis, SpecialEffect, TileKind
from gemrush.config import SessionConfig
from gemrush.session import GameSession
from gemrush.systems.match import find_matches

import pytest


def test_default_session_builds_a_settled_board():
    session = GameSession()
    board = session.board
    assert (board.rows, board.cols) == (8, 8)
    assert board.is_full()
    assert find_matches(board) == []
    assert session.status is GameStatus.IDLE
    assert session.score == 0
    assert session.cascade_depth == 0
    assert session.cascade_multiplier() == 1


def test_spawnable_kinds_follow_type_count():
    session = GameSession(SessionConfig(type_count=4, seed=11))
    kinds = {session.get(pos).kind for pos in session.board.positions()}
    assert kinds <= set(list(TileKind)[:4])


@pytest.mark.parametrize(
    'overrides',
    [dict(rows=2), dict(type_count=2), dict(type_count=8), dict(target_score=0), dict(move_limit=0), dict(time_limit=-1.0)],
)
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ValueError):
        SessionConfig(**overrides)


def test_hint_is_an_accepted_move():
    session = GameSession(SessionConfig(target_score=100000, seed=5))
    session.start()
    src, dst = session.hint()

    result = session.try_move(src, dst)

    assert result.accepted
    assert session.state.moves_used == 1


def test_activation_through_session_adds_score():
    session = GameSession(SessionConfig(target_score=100000, seed=2))
    session.start()
    session.board.set((4, 4), Tile(kind=TileKind.RUBY, special=SpecialEffect.LINE_CLEAR, axis=Axis.COLUMN))

    cleared = session.activate((4, 4))

    assert cleared == {(row, 4) for row in range(8)}
    assert session.score >= 8 * 75
    # Activations are free: they do not consume the move budget.
    assert session.state.moves_used == 0
    assert session.status is GameStatus.PLAYING
    assert session.board.is_full()
