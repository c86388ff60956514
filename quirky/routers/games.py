from __future__ import annotations
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response

from ..config import Config
from ..managers.game import GameManager, GameSession
from ..schemas import (
    BagEntryModel,
    CreateGameRequest,
    CreatedGame,
    Dimensions,
    EndTurnResult,
    GamePieceModel,
    GameState,
    GameSummary,
    JoinGameRequest,
    PieceModel,
    PlacePieceRequest,
    PlacementResult,
    PlayerSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_games(request: Request) -> GameManager:
    return request.app.state.games


def get_game(game: str, games: GameManager = Depends(get_games)) -> GameSession:
    return games.get(game)


def current_player(player: Optional[str] = Cookie(default=None, alias=Config.PLAYER_COOKIE)) -> str:
    if not player:
        raise HTTPException(status_code=401, detail="No player cookie; join the game first")
    return player


def _set_player_cookie(response: Response, name: str):
    response.set_cookie(Config.PLAYER_COOKIE, name, httponly=False)


@router.get('', response_model=List[GameSummary])
async def list_games(games: GameManager = Depends(get_games)):
    return [g.to_summary() for g in games.list_sessions()]


@router.post('', response_model=CreatedGame, status_code=201)
async def create_game(body: CreateGameRequest, response: Response, games: GameManager = Depends(get_games)):
    game = games.create_session(body.name)
    await games.join_session(game, body.player)
    _set_player_cookie(response, body.player)
    # respond with the game name, in case it was changed
    return CreatedGame(name=game.name)


@router.get('/{game}', response_model=GameState)
async def game_state(game: GameSession = Depends(get_game)):
    return game.to_state()


@router.get('/{game}/board', response_model=List[GamePieceModel])
async def get_board(game: GameSession = Depends(get_game)):
    return [gp.to_dict() for gp in game.snapshot_board()]


@router.post('/{game}/board', response_model=PlacementResult)
async def place_piece(
    body: PlacePieceRequest,
    game: GameSession = Depends(get_game),
    games: GameManager = Depends(get_games),
    player: str = Depends(current_player),
):
    points = await games.place_tile(game, player, body.shape, body.color, body.row, body.column)
    return PlacementResult(points=points)


@router.get('/{game}/pieces', response_model=List[BagEntryModel])
async def get_bag(game: GameSession = Depends(get_game)):
    return [e.to_dict() for e in game.snapshot_bag()]


@router.get('/{game}/dimensions', response_model=Dimensions)
async def get_dimensions(game: GameSession = Depends(get_game)):
    return game.snapshot_dimensions().to_dict()


@router.get('/{game}/players', response_model=Dict[str, PlayerSummary])
async def list_players(game: GameSession = Depends(get_game)):
    return game.snapshot_players()


@router.post('/{game}/players', response_model=PlayerSummary, status_code=201)
async def join_game(
    body: JoinGameRequest,
    response: Response,
    game: GameSession = Depends(get_game),
    games: GameManager = Depends(get_games),
):
    player = await games.join_session(game, body.name)
    _set_player_cookie(response, body.name)
    return player.summary()


@router.get('/{game}/players/{name}', response_model=PlayerSummary)
async def get_player(name: str, game: GameSession = Depends(get_game)):
    return game.snapshot_player(name)


@router.get('/{game}/players/{name}/pieces', response_model=List[PieceModel])
async def get_hand(name: str, game: GameSession = Depends(get_game)):
    return [p.to_dict() for p in game.snapshot_hand(name)]


@router.post('/{game}/players/{name}/end_turn', response_model=EndTurnResult)
async def end_turn(
    name: str,
    game: GameSession = Depends(get_game),
    games: GameManager = Depends(get_games),
    player: str = Depends(current_player),
):
    if player != name:
        logger.info("refusing end turn for %s in %s from %s", name, game.name, player)
        raise HTTPException(status_code=403, detail="Players can only end their own turn")
    advanced = await games.end_turn(game, name)
    return EndTurnResult(advanced=advanced)


@router.delete('/{game}/players/{name}', status_code=204)
async def leave_game(name: str, game: GameSession = Depends(get_game), games: GameManager = Depends(get_games)):
    await games.leave_session(game, name)
    return Response(status_code=204)
