from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

Shape = Literal['circle', 'star', 'diamond', 'square', 'triangle', 'clover']
Color = Literal['red', 'orange', 'yellow', 'green', 'blue', 'purple']

class PieceModel(BaseModel):
    shape: Shape
    color: Color

class GamePieceModel(BaseModel):
    piece: PieceModel
    row: int
    column: int

class BagEntryModel(BaseModel):
    piece: PieceModel
    count: int

class Dimensions(BaseModel):
    top: int
    right: int
    bottom: int
    left: int

class PlayerSummary(BaseModel):
    name: str
    points: int = 0
    has_turn: bool = False
    hand_size: int = 0

class GameSummary(BaseModel):
    name: str
    players: List[str] = []

class GameState(BaseModel):
    name: str
    players: Dict[str, PlayerSummary]
    board: List[GamePieceModel]
    dimensions: Dimensions
    bag_count: int
    current_turn: Optional[str] = None

# Requests

class CreateGameRequest(BaseModel):
    name: str = Field(..., min_length=1)
    player: str = Field(..., min_length=1)

class JoinGameRequest(BaseModel):
    name: str = Field(..., min_length=1)

class PlacePieceRequest(BaseModel):
    shape: Shape
    color: Color
    row: int
    column: int

# Responses

class CreatedGame(BaseModel):
    name: str

class PlacementResult(BaseModel):
    points: int

class EndTurnResult(BaseModel):
    advanced: bool
