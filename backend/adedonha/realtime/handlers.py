from __future__ import annotations

import logging
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room
from pydantic import ValidationError

from ..game.errors import GameError
from ..game.service import GameService
from . import events
from .schemas import (
    ChooseLetterPayload,
    CreateRoomPayload,
    IdentifyPayload,
    JoinRoomPayload,
    SubmitAnswersPayload,
)


logger = logging.getLogger(__name__)


def _reject(err: GameError) -> dict:
    emit(events.ROOM_ERROR, err.to_payload())
    return {"ok": False, "error": err.code}


def _invalid_payload(exc: ValidationError) -> dict:
    logger.debug("[invalid-payload] sid=%s errors=%s", request.sid, exc.errors())
    return _reject(GameError("invalid_payload", "Invalid request."))


def _as_dict(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def register_socketio_handlers(socketio: SocketIO, service: GameService) -> None:
    def _switch_room(previous: str | None, current: str) -> None:
        if previous and previous != current:
            leave_room(previous)
        join_room(current)

    @socketio.on(events.USER_IDENTIFY)
    def user_identify(data):
        try:
            payload = IdentifyPayload.model_validate(_as_dict(data))
        except ValidationError as exc:
            return _invalid_payload(exc)

        user = service.identify(request.sid, payload.userId, payload.name)
        ack = {"userId": user.id, "name": user.name, "coins": user.coins}
        emit(events.USER_IDENTIFIED, ack)
        return {"ok": True, **ack}

    @socketio.on(events.ROOM_CREATE)
    def room_create(data):
        try:
            payload = CreateRoomPayload.model_validate(_as_dict(data))
        except ValidationError as exc:
            return _invalid_payload(exc)

        previous = service.connection(request.sid).room_id
        room = service.create_room(request.sid, **payload.room_options())
        _switch_room(previous, room.id)

        joined = service.joined_payload(room, request.sid)
        emit(events.ROOM_JOINED, joined)
        # Roster went out before this socket was in the room.
        emit(events.ROOM_PLAYERS, {"hostId": joined["hostId"], "players": joined["players"]})
        return {"ok": True, "roomId": room.id}

    @socketio.on(events.ROOM_JOIN)
    def room_join(data):
        try:
            payload = JoinRoomPayload.model_validate(_as_dict(data))
        except ValidationError as exc:
            return _invalid_payload(exc)

        previous = service.connection(request.sid).room_id
        try:
            room = service.join_room(request.sid, payload.roomId.strip(), payload.password)
        except GameError as err:
            return _reject(err)
        _switch_room(previous, room.id)

        joined = service.joined_payload(room, request.sid)
        emit(events.ROOM_JOINED, joined)
        emit(events.ROOM_PLAYERS, {"hostId": joined["hostId"], "players": joined["players"]})
        return {"ok": True, "roomId": room.id}

    @socketio.on(events.ROOM_LIST)
    def room_list(data=None):
        return service.list_rooms()

    @socketio.on(events.ROOM_LEAVE)
    def room_leave(data=None):
        room_id = service.leave(request.sid)
        if room_id:
            leave_room(room_id)
        return {"ok": True}

    @socketio.on(events.ROOM_START)
    def room_start(data=None):
        try:
            service.start(request.sid)
        except GameError as err:
            return _reject(err)
        return {"ok": True}

    @socketio.on(events.ROUND_CHOOSE_LETTER)
    def round_choose_letter(data):
        try:
            payload = ChooseLetterPayload.model_validate(_as_dict(data))
        except ValidationError as exc:
            return _invalid_payload(exc)

        try:
            letter = service.choose_letter(request.sid, payload.letter)
        except GameError as err:
            return _reject(err)
        return {"ok": True, "letter": letter}

    @socketio.on(events.ROUND_SUBMIT_ANSWERS)
    def round_submit_answers(data):
        try:
            payload = SubmitAnswersPayload.model_validate({"answers": _as_dict(data)})
        except ValidationError as exc:
            return _invalid_payload(exc)

        try:
            status = service.submit_answers(request.sid, payload.answers)
        except GameError as err:
            return _reject(err)
        emit(events.ROUND_ANSWERS_RECEIVED, {"count": len(payload.answers)})
        return {"ok": True, **status}

    @socketio.on(events.ROUND_STOP)
    def round_stop(data=None):
        try:
            service.stop(request.sid)
        except GameError as err:
            return _reject(err)
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(*args):
        room_id = service.disconnect(request.sid)
        if room_id:
            logger.info("[disconnect] sid=%s room=%s", request.sid, room_id)
