import pytest
from esper import World

from gemrush.components.game_state import GameStatus
from gemrush.config import SessionConfig
from gemrush.events.bus import (
    EVENT_BUDGET_CHANGED,
    EVENT_GAME_STATUS_CHANGED,
    EVENT_LEVEL_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_ENDED,
    EventBus,
)
from gemrush.session import GameSession
from gemrush.utils.game_state import set_game_status
from tests.helpers import X, Y, fill_board, set_row


def _session(**overrides) -> GameSession:
    params = dict(rows=8, cols=8, type_count=7, target_score=100000, move_limit=30, seed=1)
    params.update(overrides)
    session = GameSession(SessionConfig(**params))
    fill_board(session.world)
    return session


def _arm_three_match(session):
    # Swapping (7, 2) and (7, 3) completes X X X on the bottom row.
    set_row(session.world, 7, [X, X, Y, X])


def test_start_moves_idle_session_into_play():
    session = _session()
    changes = []
    session.event_bus.subscribe(
        EVENT_GAME_STATUS_CHANGED,
        lambda s, **k: changes.append((k['previous_status'], k['new_status'])),
    )
    assert session.status is GameStatus.IDLE

    session.start()

    assert session.status is GameStatus.PLAYING
    assert changes == [(GameStatus.IDLE, GameStatus.PLAYING)]
    with pytest.raises(RuntimeError):
        session.start()


def test_moves_are_refused_before_start():
    session = _session()
    _arm_three_match(session)
    assert session.try_move((7, 2), (7, 3)).reason == 'inactive'


def test_accepted_move_passes_through_resolving_and_scores():
    session = _session()
    session.start()
    _arm_three_match(session)
    statuses = []
    scores = []
    session.event_bus.subscribe(EVENT_GAME_STATUS_CHANGED, lambda s, **k: statuses.append(k['new_status']))
    session.event_bus.subscribe(EVENT_SCORE_CHANGED, lambda s, **k: scores.append((k['delta'], k['total'])))

    result = session.try_move((7, 2), (7, 3))

    assert result.accepted
    assert statuses[:2] == [GameStatus.RESOLVING, GameStatus.PLAYING]
    assert session.state.moves_used == 1
    assert session.score == result.outcome.score_delta >= 50
    assert scores == [(session.score, session.score)]
    assert session.cascade_depth == result.outcome.cascade_depth


def test_rejected_move_does_not_use_a_move():
    session = _session()
    session.start()

    result = session.try_move((0, 0), (0, 1))

    assert result.reason == 'no_match'
    assert session.state.moves_used == 0
    assert session.status is GameStatus.PLAYING


def test_reaching_target_completes_session():
    session = _session(target_score=50)
    session.start()
    _arm_three_match(session)
    ended = {}
    session.event_bus.subscribe(EVENT_SESSION_ENDED, lambda s, **k: ended.update(k))

    session.try_move((7, 2), (7, 3))

    assert session.status is GameStatus.COMPLETED
    assert ended['status'] is GameStatus.COMPLETED
    assert ended['reason'] == 'target_reached'
    assert ended['score'] == session.score
    # Terminal sessions ignore further input.
    assert session.try_move((0, 0), (0, 1)).reason == 'inactive'


def test_running_out_of_moves_fails_session():
    session = _session(move_limit=1)
    session.start()
    _arm_three_match(session)
    ended = {}
    session.event_bus.subscribe(EVENT_SESSION_ENDED, lambda s, **k: ended.update(k))

    session.try_move((7, 2), (7, 3))

    assert session.status is GameStatus.FAILED
    assert ended['reason'] == 'moves'
    assert session.state.moves_remaining == 0


def test_running_out_of_time_fails_session():
    session = _session(time_limit=10.0)
    session.tick(5.0)
    assert session.state.time_remaining == 10.0  # clock only runs while playing

    session.start()
    session.tick(4.0)
    assert session.state.time_remaining == pytest.approx(6.0)
    assert session.status is GameStatus.PLAYING

    session.tick(7.0)
    assert session.state.time_remaining == 0.0
    assert session.status is GameStatus.FAILED


def test_restart_resets_counters_and_board():
    session = _session(move_limit=1, time_limit=30.0)
    session.start()
    _arm_three_match(session)
    session.tick(3.0)
    session.try_move((7, 2), (7, 3))
    assert session.state.is_over

    session.restart()

    state = session.state
    assert session.status is GameStatus.PLAYING
    assert state.score == 0
    assert state.moves_used == 0
    assert state.time_remaining == 30.0
    assert session.board.is_full()
    assert session.hint() is not None


def test_non_numeric_tick_is_an_error():
    session = _session(time_limit=10.0)
    session.start()
    with pytest.raises(ValueError):
        session.tick('soon')
    assert session.state.time_remaining == 10.0


def test_next_level_banks_score_and_raises_target():
    session = _session(target_score=50, move_limit=10)
    session.start()
    _arm_three_match(session)
    levels = {}
    session.event_bus.subscribe(EVENT_LEVEL_CHANGED, lambda s, **k: levels.update(k))
    session.try_move((7, 2), (7, 3))
    earned = session.score
    assert session.status is GameStatus.COMPLETED

    assert session.next_level() == 2

    state = session.state
    assert session.status is GameStatus.PLAYING
    assert session.level == 2
    assert state.target_score == 2 * 1000 + 500
    assert levels == {'level': 2, 'target_score': 2500}
    assert state.score == 0
    assert state.total_score == earned
    assert state.moves_used == 0
    assert session.board.is_full()


def test_next_level_requires_completed_session():
    session = _session()
    session.start()
    with pytest.raises(RuntimeError):
        session.next_level()


def test_extra_moves_extend_the_move_budget():
    session = _session(move_limit=1)
    session.start()
    budgets = []
    session.event_bus.subscribe(EVENT_BUDGET_CHANGED, lambda s, **k: budgets.append(k))

    assert session.add_moves()
    assert session.state.moves_remaining == 6
    assert budgets == [{'moves_remaining': 6, 'time_remaining': None}]
    # No clock configured.
    assert session.add_time() is False

    _arm_three_match(session)
    session.try_move((7, 2), (7, 3))
    assert session.status is GameStatus.PLAYING
    assert session.state.moves_remaining == 5


def test_extra_time_extends_the_clock():
    session = _session(move_limit=None, time_limit=10.0)
    session.start()
    session.tick(4.0)

    assert session.add_time()
    assert session.state.time_remaining == pytest.approx(36.0)
    assert session.add_moves() is False
    with pytest.raises(ValueError):
        session.add_time(0)


def test_boosters_refused_after_session_ends():
    session = _session(time_limit=1.0)
    session.start()
    session.tick(2.0)
    assert session.status is GameStatus.FAILED
    with pytest.raises(RuntimeError):
        session.add_moves()


def test_restart_drops_booster_top_ups():
    session = _session(move_limit=3)
    session.start()
    session.add_moves(2)
    session.restart()
    assert session.state.move_limit == 3


def test_status_change_needs_a_game_state():
    with pytest.raises(RuntimeError):
        set_game_status(World(), EventBus(), GameStatus.PLAYING)
