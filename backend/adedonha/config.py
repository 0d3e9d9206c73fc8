import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Game
    REVEAL_DURATION_SEC = int(os.environ.get("REVEAL_DURATION_SEC", "8"))
    TICK_INTERVAL_SEC = int(os.environ.get("TICK_INTERVAL_SEC", "1"))
    DEFAULT_CAPACITY = int(os.environ.get("DEFAULT_CAPACITY", "8"))
    DEFAULT_TARGET_ROUNDS = int(os.environ.get("DEFAULT_TARGET_ROUNDS", "5"))

    # Coins
    STARTING_COINS = int(os.environ.get("STARTING_COINS", "100"))
    VICTORY_BONUS = int(os.environ.get("VICTORY_BONUS", "50"))
    PARTICIPATION_BONUS = int(os.environ.get("PARTICIPATION_BONUS", "5"))
    RANKING_LIMIT = int(os.environ.get("RANKING_LIMIT", "100"))
