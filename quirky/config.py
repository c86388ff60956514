import os


class Config:
    # Comma separated list of allowed CORS origins
    CORS_ORIGINS = [o.strip() for o in os.environ.get('QUIRKY_CORS_ORIGINS', '*').split(',') if o.strip()]
    # Cookie carrying the per-browser player name
    PLAYER_COOKIE = os.environ.get('QUIRKY_PLAYER_COOKIE', 'player')
    LOG_LEVEL = os.environ.get('QUIRKY_LOG_LEVEL', 'INFO').upper()
    # Row/column of the single-cell bounding box before any piece is placed
    BOARD_ORIGIN = int(os.environ.get('QUIRKY_BOARD_ORIGIN', '90'))
