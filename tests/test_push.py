import asyncio

import pytest

from quirky import main
from quirky.managers.game import GameManager


@pytest.fixture()
def pushing_manager(recording_sio, rng):
    return GameManager(recording_sio, rng=rng)


def states(sio):
    return [e for e in sio.emitted if e['event'] == 'game:state']


def test_mutations_broadcast_state_to_game_room(pushing_manager, recording_sio):
    game = pushing_manager.create_session('room')

    async def scenario():
        await pushing_manager.join_session(game, 'A')
        assert len(states(recording_sio)) == 1
        await pushing_manager.join_session(game, 'B')
        piece = game.snapshot_hand('A')[0]
        await pushing_manager.place_tile(game, 'A', piece.shape, piece.color, 90, 90)
        assert len(states(recording_sio)) == 3
        await pushing_manager.end_turn(game, 'A')

    asyncio.run(scenario())
    pushed = states(recording_sio)
    assert len(pushed) == 4
    assert all(e['room'] == 'room' for e in pushed)
    assert pushed[-1]['data']['current_turn'] == 'B'
    assert len(pushed[2]['data']['board']) == 1


def test_ignored_end_turn_broadcasts_nothing(pushing_manager, recording_sio):
    game = pushing_manager.create_session('room')

    async def scenario():
        await pushing_manager.join_session(game, 'A')
        await pushing_manager.join_session(game, 'B')
        recording_sio.emitted.clear()
        assert await pushing_manager.end_turn(game, 'B') is False

    asyncio.run(scenario())
    assert recording_sio.emitted == []


def test_join_game_event_sends_current_state(monkeypatch, pushing_manager, recording_sio):
    game = pushing_manager.create_session('room')
    asyncio.run(pushing_manager.join_session(game, 'A'))
    recording_sio.emitted.clear()
    monkeypatch.setattr(main, 'sio', recording_sio)
    monkeypatch.setattr(main.app.state, 'games', pushing_manager)

    asyncio.run(main.join_game('sid-1', 'room'))

    assert recording_sio.rooms == {'room': {'sid-1'}}
    assert len(recording_sio.emitted) == 1
    sent = recording_sio.emitted[0]
    assert sent['event'] == 'game:state'
    assert sent['to'] == 'sid-1'
    assert sent['data']['name'] == 'room'
    assert list(sent['data']['players']) == ['A']


def test_join_game_event_for_unknown_game(monkeypatch, pushing_manager, recording_sio):
    monkeypatch.setattr(main, 'sio', recording_sio)
    monkeypatch.setattr(main.app.state, 'games', pushing_manager)

    asyncio.run(main.join_game('sid-1', 'nope'))

    assert recording_sio.rooms == {'nope': {'sid-1'}}
    assert recording_sio.emitted == []
