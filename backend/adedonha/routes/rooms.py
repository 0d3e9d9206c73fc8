from __future__ import annotations

from flask import Blueprint, jsonify

from ..game.service import GameService
from .util import get_service

bp = Blueprint("rooms", __name__)


@bp.get("/rooms")
def list_public_rooms():
    # Password rooms are only listed over the socket.
    service: GameService = get_service()
    return jsonify(service.list_rooms(public=True))
