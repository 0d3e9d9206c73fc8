from __future__ import annotations

from flask import current_app

from ..game.service import GameService


def get_service() -> GameService:
    return current_app.extensions["adedonha"]
