from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .exceptions import AlreadyOccupied, IncompatibleAdjacent, NotColinearThisTurn, TooManyInLine

SHAPES = ('circle', 'star', 'diamond', 'square', 'triangle', 'clover')
COLORS = ('red', 'orange', 'yellow', 'green', 'blue', 'purple')

COPIES_PER_PIECE = 3
HAND_SIZE = 6
MAX_LINE = 6  # longest run of pieces allowed in a row or column


@dataclass(frozen=True)
class Piece:
    shape: str
    color: str

    def to_dict(self) -> dict:
        return {'shape': self.shape, 'color': self.color}


@dataclass(frozen=True)
class GamePiece:
    piece: Piece
    row: int
    column: int

    def to_dict(self) -> dict:
        return {'piece': self.piece.to_dict(), 'row': self.row, 'column': self.column}


@dataclass
class BagEntry:
    piece: Piece
    count: int

    def to_dict(self) -> dict:
        return {'piece': self.piece.to_dict(), 'count': self.count}


class PieceBag:
    """Multiset of undrawn pieces.

    Entries keep their insertion order and are dropped once their count hits
    zero. Every physical tile is equally likely to be drawn.
    """

    def __init__(self, rng: Optional[random.Random] = None, copies: int = COPIES_PER_PIECE):
        self._rng = rng or random.Random()
        self._entries: List[BagEntry] = [
            BagEntry(Piece(shape, color), copies) for color in COLORS for shape in SHAPES
        ]

    def __len__(self) -> int:
        return sum(e.count for e in self._entries)

    def count(self, piece: Piece) -> int:
        entry = self._find(piece)
        return entry.count if entry else 0

    def draw(self, num: int) -> List[Piece]:
        drawn: List[Piece] = []
        while len(drawn) < num and self._entries:
            r = self._rng.randrange(len(self))
            for idx, entry in enumerate(self._entries):
                if r < entry.count:
                    break
                r -= entry.count
            drawn.append(entry.piece)
            entry.count -= 1
            if entry.count < 1:
                del self._entries[idx]
        return drawn

    def return_pieces(self, pieces: Iterable[Piece]) -> None:
        for piece in pieces:
            entry = self._find(piece)
            if entry:
                entry.count += 1
            else:  # first piece of its kind
                self._entries.append(BagEntry(piece, 1))

    def snapshot(self) -> List[BagEntry]:
        return [BagEntry(e.piece, e.count) for e in self._entries]

    def _find(self, piece: Piece) -> Optional[BagEntry]:
        return next((e for e in self._entries if e.piece == piece), None)


@dataclass
class BoundingBox:
    top: int
    right: int
    bottom: int
    left: int

    @classmethod
    def at(cls, row: int, column: int) -> 'BoundingBox':
        return cls(top=row, right=column, bottom=row, left=column)

    def expand(self, row: int, column: int) -> None:
        self.top = min(self.top, row)
        self.bottom = max(self.bottom, row)
        self.left = min(self.left, column)
        self.right = max(self.right, column)

    def to_dict(self) -> dict:
        return {'top': self.top, 'right': self.right, 'bottom': self.bottom, 'left': self.left}


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)


class Board:
    """Sparse grid of committed pieces. Positions are never vacated."""

    def __init__(self, origin: Tuple[int, int] = (90, 90)):
        self._cells: Dict[Tuple[int, int], Piece] = {}
        self._pieces: List[GamePiece] = []
        self.dimensions = BoundingBox.at(*origin)

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[GamePiece]:
        return iter(self._pieces)

    def __contains__(self, gamepiece: GamePiece) -> bool:
        return self._cells.get((gamepiece.row, gamepiece.column)) == gamepiece.piece

    def is_occupied(self, row: int, column: int) -> bool:
        return (row, column) in self._cells

    def get(self, row: int, column: int) -> Optional[GamePiece]:
        piece = self._cells.get((row, column))
        return piece and GamePiece(piece, row, column)

    def adjacent(self, row: int, column: int, direction: Direction, distance: int = 1) -> Optional[GamePiece]:
        dr, dc = direction.value
        return self.get(row + dr * distance, column + dc * distance)

    def place(self, gamepiece: GamePiece) -> None:
        self._cells[(gamepiece.row, gamepiece.column)] = gamepiece.piece
        self._pieces.append(gamepiece)
        self.dimensions.expand(gamepiece.row, gamepiece.column)

    def count(self, piece: Piece) -> int:
        return sum(1 for p in self._cells.values() if p == piece)

    def snapshot(self) -> List[GamePiece]:
        return list(self._pieces)


def compatible(a: Piece, b: Piece) -> bool:
    # same color or same shape, never both
    return (a.color == b.color) != (a.shape == b.shape)


def _line_points(board: Board, turn_placements: Set[GamePiece], gamepiece: GamePiece, direction: Direction) -> int:
    points = 0
    for offset in range(1, MAX_LINE + 1):
        adjacent = board.adjacent(gamepiece.row, gamepiece.column, direction, offset)
        if adjacent is None:
            return points
        if offset == MAX_LINE:
            raise TooManyInLine(MAX_LINE)
        if not compatible(adjacent.piece, gamepiece.piece):
            raise IncompatibleAdjacent(adjacent)
        # a neighbour already played this turn earns nothing extra
        if adjacent not in turn_placements:
            points += 1
    return points


def score_placement(board: Board, turn_placements: Set[GamePiece], gamepiece: GamePiece) -> int:
    """Validate a placement without committing it.

    Returns the points the placement is worth, or raises an
    InvalidPlacement subclass describing why it is refused.
    """
    if board.is_occupied(gamepiece.row, gamepiece.column):
        raise AlreadyOccupied(gamepiece.row, gamepiece.column)

    bonus = sum(_line_points(board, turn_placements, gamepiece, d) for d in Direction)

    for other in turn_placements:
        if other.row != gamepiece.row and other.column != gamepiece.column:
            raise NotColinearThisTurn(other)

    return 1 + bonus  # one point for placing the piece itself


def add_game_piece(board: Board, turn_placements: Set[GamePiece], gamepiece: GamePiece) -> int:
    """Add a piece to the board if the placement is valid.

    Nothing is mutated unless every check passes; on success the piece is
    recorded on the board and in the turn placements, and its points are
    returned.
    """
    points = score_placement(board, turn_placements, gamepiece)
    board.place(gamepiece)
    turn_placements.add(gamepiece)
    return points
