from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from ..game.errors import GameError
from ..game.registry import public_user, user_profile
from ..realtime.schemas import AddFriendRequest, UpsertUserRequest
from .util import get_service

bp = Blueprint("users", __name__)


@bp.get("/ranking")
def global_ranking():
    limit = current_app.config.get("RANKING_LIMIT", 100)
    return jsonify(get_service().registry.ranking(limit=limit))


@bp.get("/ranking/friends/<user_id>")
def friend_ranking(user_id: str):
    return jsonify(get_service().registry.friend_ranking(user_id))


@bp.get("/users/<user_id>")
def get_user(user_id: str):
    user = get_service().registry.get(user_id)
    if not user:
        return jsonify({"error": "user_not_found"}), 404
    return jsonify(user_profile(user))


@bp.post("/users")
def upsert_user():
    try:
        payload = UpsertUserRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError:
        return jsonify({"error": "invalid_payload"}), 400

    user = get_service().registry.upsert(payload.userId, payload.name)
    return jsonify(public_user(user))


@bp.post("/friends")
def add_friend():
    try:
        payload = AddFriendRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError:
        return jsonify({"error": "user_and_friend_required"}), 400

    try:
        user = get_service().registry.add_friend(payload.userId, payload.friendId)
    except GameError as err:
        return jsonify({"error": err.code}), 400
    return jsonify({"friends": sorted(user.friends)})
