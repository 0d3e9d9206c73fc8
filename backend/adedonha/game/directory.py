from __future__ import annotations

import logging
import uuid
from threading import RLock

from .errors import GameError, room_not_found
from .models import PlayerSession, Room
from .themes import (
    DEFAULT_MODE,
    DEFAULT_THEME,
    CATEGORIES_BY_THEME,
    ROUND_DURATION_BY_MODE,
    categories_for,
    clamp_capacity,
    round_duration_for,
)


logger = logging.getLogger(__name__)

DEFAULT_ROOM_NAME = "New room"


class RoomDirectory:
    def __init__(self, default_capacity: int = 8, default_target_rounds: int = 5) -> None:
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self.default_capacity = default_capacity
        self.default_target_rounds = default_target_rounds

    def get(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def require(self, room_id: str | None) -> Room:
        room = self.get(room_id) if room_id else None
        if room is None:
            raise room_not_found()
        return room

    def create(
        self,
        host: PlayerSession,
        name: str | None = None,
        password: str | None = None,
        theme: str | None = None,
        categories: list[str] | None = None,
        target_rounds: int | None = None,
        capacity: int | None = None,
        mode: str | None = None,
    ) -> Room:
        with self._lock:
            room_id = uuid.uuid4().hex[:8]
            while room_id in self._rooms:
                room_id = uuid.uuid4().hex[:8]

            mode = mode if mode in ROUND_DURATION_BY_MODE else DEFAULT_MODE
            theme = theme if theme in CATEGORIES_BY_THEME else DEFAULT_THEME
            room = Room(
                id=room_id,
                host_user_id=host.user_id,
                name=(name or "").strip() or DEFAULT_ROOM_NAME,
                password=password or None,
                theme=theme,
                mode=mode,
                categories=categories_for(theme, categories),
                target_rounds=target_rounds or self.default_target_rounds,
                capacity=clamp_capacity(capacity, self.default_capacity),
                round_duration_sec=round_duration_for(mode),
            )
            room.players[host.sid] = host
            self._rooms[room_id] = room

            logger.info(
                "[room-create] room=%s host=%s mode=%s capacity=%s rounds=%s",
                room.id,
                host.user_id,
                room.mode,
                room.capacity,
                room.target_rounds,
            )
            return room

    def join(self, room_id: str, player: PlayerSession, password: str | None = None) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise room_not_found()
            if room.phase != "waiting":
                raise GameError("game_already_started", "The game has already started.")
            if room.password and room.password != (password or ""):
                raise GameError("wrong_password", "Wrong password.")
            if len(room.players) >= room.capacity:
                raise GameError("room_full", "The room is full.")

            room.players[player.sid] = player
            logger.info("[room-join] room=%s sid=%s players=%s", room.id, player.sid, len(room.players))
            return room

    def remove_player(self, room: Room, sid: str) -> PlayerSession | None:
        """Drop a session; destroys the room when it was the last one."""
        with self._lock:
            player = room.players.pop(sid, None)
            if player is None:
                return None

            if not room.players:
                self.destroy(room)
                return player

            if player.user_id == room.host_user_id:
                # First remaining player in join order becomes host.
                new_host = next(iter(room.players.values()))
                room.host_user_id = new_host.user_id
                logger.info("[host-transfer] room=%s host=%s", room.id, new_host.user_id)

            return player

    def destroy(self, room: Room) -> None:
        with self._lock:
            for handle in (room.timer, room.reveal_timer):
                if handle is not None:
                    handle.cancel()
            room.timer = None
            room.reveal_timer = None
            room.phase = "finished"
            if self._rooms.pop(room.id, None) is not None:
                logger.info("[room-destroy] room=%s", room.id)

    def list(self, public: bool = False) -> list[Room]:
        with self._lock:
            rooms = [r for r in self._rooms.values() if r.phase == "waiting"]
            if public:
                rooms = [r for r in rooms if not r.has_password]
            return rooms

    def all(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())


def room_summary(room: Room) -> dict:
    return {
        "id": room.id,
        "name": room.name,
        "theme": room.theme,
        "mode": room.mode,
        "playerCount": len(room.players),
        "capacity": room.capacity,
        "hasPassword": room.has_password,
    }
