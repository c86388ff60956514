from __future__ import annotations
import logging

import socketio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Config
from .exceptions import GameError
from .managers.game import GameManager
from .routers.games import router as games_router

logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)

# Socket.IO server (ASGI)
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*' if Config.CORS_ORIGINS == ['*'] else Config.CORS_ORIGINS,
)
app = FastAPI(title="Quirky Server", version="0.1.0")

# Mount Socket.IO ASGI application
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)

# CORS for REST
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

games = GameManager(sio, origin=(Config.BOARD_ORIGIN, Config.BOARD_ORIGIN))
app.state.games = games

app.include_router(games_router, prefix='/games')


@app.exception_handler(GameError)
async def game_error_handler(request: Request, exc: GameError):
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Socket.IO Events
@sio.on('join-game')
async def join_game(sid, game_name: str):
    # Subscribe to state broadcasts for a game; joining as a player is done over REST
    await sio.enter_room(sid, game_name)
    game = app.state.games.find(game_name)
    if game:
        await sio.emit('game:state', game.to_state().model_dump(), to=sid)

@sio.on('leave-game')
async def leave_game(sid, game_name: str):
    await sio.leave_room(sid, game_name)

# Export ASGI app for uvicorn
application = asgi_app

# For local running: uvicorn quirky.main:application --reload --host 0.0.0.0 --port 8010
