"""
Exception definitions shared by the game core and the HTTP layer.

Hierarchy:
- GameError (base for all game exceptions)
  - NotFound
    - SessionNotFound
    - PlayerNotFound
  - PlayerAlreadyExists
  - PlayerMustOwnTile
  - InvalidPlacement (placement refused, nothing mutated)
    - AlreadyOccupied
    - IncompatibleAdjacent
    - TooManyInLine
    - NotColinearThisTurn
"""
from __future__ import annotations

from typing import Any, Dict, Optional


# =========================
# Base exception
# =========================

class GameError(Exception):
    """Base exception for all recoverable game errors."""
    code: str = 'game_error'
    status_code: int = 400

    def to_dict(self) -> Dict[str, Any]:
        return {'detail': str(self), 'reason': self.code}


class NotFound(GameError):
    code = 'not_found'
    status_code = 404


class SessionNotFound(NotFound):
    code = 'session_not_found'

    def __init__(self, name: str):
        super().__init__(f"No such game exists: {name}")
        self.name = name


class PlayerNotFound(NotFound):
    code = 'player_not_found'

    def __init__(self, name: str):
        super().__init__(f"No such player in this game: {name}")
        self.name = name


class PlayerAlreadyExists(GameError):
    code = 'player_already_exists'
    status_code = 409

    def __init__(self, name: str):
        super().__init__(f"Player already exists: {name}")
        self.name = name


class PlayerMustOwnTile(GameError):
    code = 'must_own_tile'
    status_code = 409

    def __init__(self, piece):
        super().__init__(f"Player does not hold a {piece.color} {piece.shape}")
        self.piece = piece


# =========================
# Placement exceptions
# =========================

class InvalidPlacement(GameError):
    """A proposed piece placement was rejected; the board is unchanged."""
    code = 'invalid_placement'
    status_code = 409


class AlreadyOccupied(InvalidPlacement):
    code = 'already_occupied'

    def __init__(self, row: int, column: int):
        super().__init__("GamePiece already exists.")
        self.row = row
        self.column = column


class IncompatibleAdjacent(InvalidPlacement):
    code = 'incompatible_adjacent'

    def __init__(self, offending):
        piece = offending.piece
        super().__init__(f"GamePiece adjacent to incompatible piece: {piece.color} {piece.shape}")
        self.offending = offending

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['piece'] = self.offending.to_dict()
        return data


class TooManyInLine(InvalidPlacement):
    code = 'too_many_in_line'

    def __init__(self, limit: int):
        super().__init__(f"A line can't hold more than {limit} pieces.")
        self.limit = limit


class NotColinearThisTurn(InvalidPlacement):
    code = 'not_colinear_this_turn'

    def __init__(self, offending: Optional[Any] = None):
        super().__init__("GamePiece must be in same row or column as others placed this turn.")
        self.offending = offending
