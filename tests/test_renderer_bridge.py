from gemrush.components.game_state import GameStatus
from gemrush.components.tile_types import SpecialEffect
from gemrush.config import SessionConfig
from gemrush.session import GameSession
from tests.helpers import X, Y, fill_board, set_row


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def on_board_changed(self, board):
        self.calls.append(('board', board))

    def on_match(self, groups_by_depth):
        self.calls.append(('match', groups_by_depth))

    def on_score_changed(self, delta, total):
        self.calls.append(('score', delta, total))

    def on_power_up_created(self, position, effect):
        self.calls.append(('power_up', position, effect))

    def on_session_ended(self, status):
        self.calls.append(('ended', status))

    def kinds(self):
        return [call[0] for call in self.calls]


def _session(renderer, **overrides):
    params = dict(target_score=100000, seed=3)
    params.update(overrides)
    session = GameSession(SessionConfig(**params), renderer=renderer)
    fill_board(session.world)
    return session


def test_renderer_follows_a_move():
    renderer = RecordingRenderer()
    session = _session(renderer, target_score=50)
    session.start()
    set_row(session.world, 7, [X, X, Y, X, X])
    set_row(session.world, 6, [X], start_col=2)

    session.try_move((7, 2), (6, 2))

    kinds = renderer.kinds()
    assert kinds[0] == 'board'
    assert 'match' in kinds
    assert ('ended', GameStatus.COMPLETED) == renderer.calls[-1]
    score_calls = [call for call in renderer.calls if call[0] == 'score']
    assert score_calls == [('score', session.score, session.score)]
    match_call = next(call for call in renderer.calls if call[0] == 'match')
    assert len(match_call[1][0][0]) == 5
    power_ups = [call for call in renderer.calls if call[0] == 'power_up']
    assert power_ups[0] == ('power_up', (7, 2), SpecialEffect.COLOR_CLEAR)


def test_detached_renderer_receives_nothing():
    first = RecordingRenderer()
    second = RecordingRenderer()
    session = _session(first)
    session.attach_renderer(second)

    session.start()

    assert first.calls == []
    assert second.kinds() == ['board']
