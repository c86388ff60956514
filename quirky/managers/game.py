from __future__ import annotations
import logging
import random
import threading
from typing import Dict, List, Optional, Set, Tuple

from ..exceptions import PlayerMustOwnTile, SessionNotFound
from ..game_logic import Board, BagEntry, BoundingBox, GamePiece, Piece, PieceBag, add_game_piece
from ..schemas import GameState, GameSummary
from .turns import Player, TurnController

logger = logging.getLogger(__name__)


class GameSession:
    """One game room: board, bag, players and the current turn's placements.

    Every mutation and every snapshot runs under the session lock, so
    operations on one game are serialized and readers never see a
    half-committed placement.
    """

    def __init__(self, name: str, origin: Tuple[int, int] = (90, 90), rng: Optional[random.Random] = None):
        self.name = name
        self.board = Board(origin)
        self.bag = PieceBag(rng)
        self.turn_placements: Set[GamePiece] = set()
        self.turns = TurnController(self.bag, self.turn_placements)
        self._lock = threading.RLock()

    @property
    def dimensions(self) -> BoundingBox:
        return self.board.dimensions

    def join(self, player_name: str) -> Player:
        with self._lock:
            return self.turns.add_player(player_name)

    def leave(self, player_name: str) -> bool:
        """Remove a player; True when nobody is left in the game."""
        with self._lock:
            return self.turns.remove_player(player_name)

    def end_turn(self, player_name: str) -> bool:
        with self._lock:
            return self.turns.end_turn(player_name)

    def place_tile(self, player_name: str, shape: str, color: str, row: int, column: int) -> int:
        with self._lock:
            player = self.turns.get(player_name)
            piece = Piece(shape, color)
            if piece not in player.hand:
                raise PlayerMustOwnTile(piece)
            points = add_game_piece(self.board, self.turn_placements, GamePiece(piece, row, column))
            player.points += points
            player.hand.remove(piece)
            return points

    # Snapshots

    def snapshot_board(self) -> List[GamePiece]:
        with self._lock:
            return self.board.snapshot()

    def snapshot_bag(self) -> List[BagEntry]:
        with self._lock:
            return self.bag.snapshot()

    def snapshot_dimensions(self) -> BoundingBox:
        with self._lock:
            d = self.board.dimensions
            return BoundingBox(top=d.top, right=d.right, bottom=d.bottom, left=d.left)

    def snapshot_players(self) -> Dict[str, dict]:
        with self._lock:
            return {p.name: p.summary() for p in self.turns}

    def snapshot_player(self, player_name: str) -> dict:
        with self._lock:
            return self.turns.get(player_name).summary()

    def snapshot_hand(self, player_name: str) -> List[Piece]:
        with self._lock:
            return list(self.turns.get(player_name).hand)

    def to_summary(self) -> GameSummary:
        with self._lock:
            return GameSummary(name=self.name, players=[p.name for p in self.turns])

    def to_state(self) -> GameState:
        with self._lock:
            active = self.turns.active_player
            return GameState(
                name=self.name,
                players=self.snapshot_players(),
                board=[gp.to_dict() for gp in self.board],
                dimensions=self.board.dimensions.to_dict(),
                bag_count=len(self.bag),
                current_turn=active.name if active else None,
            )


class GameManager:
    """Registry of live game sessions, keyed by game name."""

    def __init__(self, sio, origin: Tuple[int, int] = (90, 90), rng: Optional[random.Random] = None):
        self.sio = sio
        self.origin = origin
        self.rng = rng or random.Random()
        self.games: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def list_sessions(self) -> List[GameSession]:
        with self._lock:
            return list(self.games.values())

    def find(self, name: str) -> Optional[GameSession]:
        with self._lock:
            return self.games.get(name)

    def get(self, name: str) -> GameSession:
        game = self.find(name)
        if game is None:
            raise SessionNotFound(name)
        return game

    def create_session(self, requested_name: str) -> GameSession:
        with self._lock:
            name = requested_name
            while name in self.games:
                # game already exists, try a new name
                name = f"{name}{self.rng.randrange(10)}"
            game = GameSession(name, self.origin, random.Random(self.rng.random()))
            self.games[name] = game
        logger.info("[game] created %s (requested %s)", name, requested_name)
        return game

    def _check_live(self, game: GameSession) -> None:
        # caller holds the registry lock
        if self.games.get(game.name) is not game:
            raise SessionNotFound(game.name)

    async def broadcast(self, game: GameSession):
        await self.sio.emit('game:state', game.to_state().model_dump(), room=game.name)

    async def join_session(self, game: GameSession, player_name: str) -> Player:
        with self._lock:
            self._check_live(game)
            player = game.join(player_name)
        logger.info("[game] %s joined %s", player_name, game.name)
        await self.broadcast(game)
        return player

    async def leave_session(self, game: GameSession, player_name: str) -> None:
        with self._lock:
            self._check_live(game)
            empty = game.leave(player_name)
            if empty:
                # last player out, drop the game
                del self.games[game.name]
        logger.info("[game] %s left %s", player_name, game.name)
        if empty:
            logger.info("[game] destroyed %s", game.name)
        else:
            await self.broadcast(game)

    async def place_tile(self, game: GameSession, player_name: str, shape: str, color: str, row: int, column: int) -> int:
        points = game.place_tile(player_name, shape, color, row, column)
        logger.debug("[game] %s placed %s %s at (%d, %d) for %d", player_name, color, shape, row, column, points)
        await self.broadcast(game)
        return points

    async def end_turn(self, game: GameSession, player_name: str) -> bool:
        advanced = game.end_turn(player_name)
        if not advanced:
            logger.info("[game] ignoring end turn from %s in %s: not their turn", player_name, game.name)
            return False
        await self.broadcast(game)
        return True
