from __future__ import annotations

from flask_socketio import SocketIO


class SocketIOBroadcaster:
    def __init__(self, socketio: SocketIO) -> None:
        self._socketio = socketio

    def emit(self, event: str, payload: dict, to: str) -> None:
        self._socketio.emit(event, payload, to=to)

    def close_room(self, room_id: str) -> None:
        self._socketio.server.close_room(room_id, namespace="/")
