import random

import pytest
import socketio
from fastapi.testclient import TestClient

from quirky.game_logic import COLORS, SHAPES, Board, Piece, PieceBag
from quirky.main import app
from quirky.managers.game import GameManager, GameSession


def assert_conserved(session):
    """Every combination is in the bag, a hand or on the board, three times over."""
    for shape in SHAPES:
        for color in COLORS:
            piece = Piece(shape, color)
            in_hands = sum(p.hand.count(piece) for p in session.turns)
            total = session.bag.count(piece) + in_hands + session.board.count(piece)
            assert total == 3, f"{color} {shape}: {total}"


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def bag(rng):
    return PieceBag(rng)


@pytest.fixture()
def board():
    return Board((90, 90))


@pytest.fixture()
def session(rng):
    return GameSession('test', rng=rng)


@pytest.fixture()
def manager(rng):
    return GameManager(socketio.AsyncServer(async_mode='asgi'), rng=rng)


@pytest.fixture()
def client(rng):
    previous = app.state.games
    app.state.games = GameManager(previous.sio, rng=rng)
    with TestClient(app) as test_client:
        yield test_client
    app.state.games = previous


class RecordingServer:
    """Stands in for the Socket.IO server and records what would be sent."""

    def __init__(self):
        self.emitted = []
        self.rooms = {}

    async def emit(self, event, data=None, to=None, room=None, **kwargs):
        self.emitted.append({'event': event, 'data': data, 'to': to, 'room': room})

    async def enter_room(self, sid, room, namespace=None):
        self.rooms.setdefault(room, set()).add(sid)

    async def leave_room(self, sid, room, namespace=None):
        self.rooms.get(room, set()).discard(sid)


@pytest.fixture()
def recording_sio():
    return RecordingServer()
