from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from ..exceptions import PlayerAlreadyExists, PlayerNotFound
from ..game_logic import HAND_SIZE, GamePiece, Piece, PieceBag


@dataclass
class Player:
    name: str
    hand: List[Piece] = field(default_factory=list)
    points: int = 0
    has_turn: bool = False

    def summary(self) -> dict:
        return {
            'name': self.name,
            'points': self.points,
            'has_turn': self.has_turn,
            'hand_size': len(self.hand),
        }


class TurnController:
    """Ordered player registry and the turn rotation between its members.

    Rotation follows registry insertion order, so players leaving and
    joining change who comes next.
    """

    def __init__(self, bag: PieceBag, turn_placements: Set[GamePiece]):
        self.bag = bag
        # shared with the session; cleared in place whenever the turn moves on
        self.turn_placements = turn_placements
        self._players: Dict[str, Player] = {}

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    def __contains__(self, name: str) -> bool:
        return name in self._players

    def get(self, name: str) -> Player:
        player = self._players.get(name)
        if player is None:
            raise PlayerNotFound(name)
        return player

    @property
    def active_player(self) -> Optional[Player]:
        return next((p for p in self._players.values() if p.has_turn), None)

    def add_player(self, name: str) -> Player:
        if name in self._players:
            raise PlayerAlreadyExists(name)
        player = Player(name, hand=self.bag.draw(HAND_SIZE))
        self._players[name] = player
        # first player gets the turn
        if len(self._players) == 1:
            player.has_turn = True
        return player

    def end_turn(self, name: str) -> bool:
        """Pass the turn from `name` to the next player.

        Returns False, changing nothing, when `name` does not hold the turn.
        """
        player = self.get(name)
        if not player.has_turn:
            return False
        self.turn_placements.clear()
        self._advance(player)
        return True

    def remove_player(self, name: str) -> bool:
        """Remove a player, returning their hand to the bag.

        Returns True when the registry is empty afterwards.
        """
        player = self.get(name)
        if player.has_turn:
            self.turn_placements.clear()
            if len(self._players) > 1:
                self._advance(player)
        self.bag.return_pieces(player.hand)
        player.hand = []
        del self._players[name]
        return not self._players

    def _advance(self, player: Player) -> None:
        player.has_turn = False
        names = list(self._players)
        next_name = names[(names.index(player.name) + 1) % len(names)]
        nxt = self._players[next_name]
        nxt.has_turn = True
        # next player draws back up to a full hand
        nxt.hand.extend(self.bag.draw(HAND_SIZE - len(nxt.hand)))
