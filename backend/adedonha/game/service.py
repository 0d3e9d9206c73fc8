from __future__ import annotations

import logging
import math
import string
import uuid
from threading import RLock
from typing import Any, Mapping

from ..realtime import events
from .directory import RoomDirectory, room_summary
from .elimination import eliminate_lowest, survival_ranking
from .errors import GameError, not_in_room
from .models import Connection, EliminatedPlayer, PlayerSession, Room, User
from .registry import UserRegistry
from .rewards import distribute_rewards, standings
from .scoring import score_round
from .themes import random_letter


logger = logging.getLogger(__name__)


def sanitize_letter(raw: Any) -> str:
    """First A-Z character of ``raw``, upper-cased, or "" if there is none."""
    for ch in str(raw or "").upper():
        if ch in string.ascii_uppercase:
            return ch
    return ""


def players_payload(room: Room) -> dict:
    return {
        "hostId": room.host_user_id,
        "players": [
            {"socketId": p.sid, "name": p.name, "userId": p.user_id, "score": p.score}
            for p in room.players.values()
        ],
    }


def readiness(room: Room) -> dict:
    total = len(room.players)
    ready = sum(1 for p in room.players.values() if p.has_answered)
    minimum = math.ceil(total / 2)
    return {
        "readyCount": ready,
        "total": total,
        "minimumRequired": minimum,
        "canStop": ready >= minimum,
    }


class GameService:
    """Room state machine.

    Every inbound player action and every timer callback runs under one
    re-entrant lock and is applied to completion before the next one, so a
    room never observes a half-applied transition.

    ``broadcaster`` needs ``emit(event, payload, to)`` and
    ``close_room(room_id)``; ``scheduler`` needs ``every`` and ``later``
    returning handles with ``cancel()``.
    """

    def __init__(
        self,
        registry: UserRegistry,
        directory: RoomDirectory,
        scheduler,
        broadcaster,
        reveal_duration_sec: int = 8,
        tick_interval_sec: int = 1,
        victory_bonus: int = 50,
        participation_bonus: int = 5,
    ) -> None:
        self._lock = RLock()
        self._connections: dict[str, Connection] = {}
        self.registry = registry
        self.directory = directory
        self.scheduler = scheduler
        self.broadcaster = broadcaster
        self.reveal_duration_sec = reveal_duration_sec
        self.tick_interval_sec = tick_interval_sec
        self.victory_bonus = victory_bonus
        self.participation_bonus = participation_bonus

    @classmethod
    def from_config(cls, config: Mapping[str, Any], scheduler, broadcaster) -> "GameService":
        return cls(
            registry=UserRegistry(starting_coins=config.get("STARTING_COINS", 100)),
            directory=RoomDirectory(
                default_capacity=config.get("DEFAULT_CAPACITY", 8),
                default_target_rounds=config.get("DEFAULT_TARGET_ROUNDS", 5),
            ),
            scheduler=scheduler,
            broadcaster=broadcaster,
            reveal_duration_sec=config.get("REVEAL_DURATION_SEC", 8),
            tick_interval_sec=config.get("TICK_INTERVAL_SEC", 1),
            victory_bonus=config.get("VICTORY_BONUS", 50),
            participation_bonus=config.get("PARTICIPATION_BONUS", 5),
        )

    # -- connections -----------------------------------------------------

    def connection(self, sid: str) -> Connection:
        with self._lock:
            conn = self._connections.get(sid)
            if conn is None:
                conn = Connection(sid=sid)
                self._connections[sid] = conn
            return conn

    def identify(self, sid: str, user_id: str | None = None, name: str | None = None) -> User:
        with self._lock:
            conn = self.connection(sid)
            user = self.registry.get_or_create((user_id or "").strip() or str(uuid.uuid4()), name)
            conn.user_id = user.id
            conn.name = user.name
            return user

    def _new_session(self, conn: Connection) -> PlayerSession:
        if conn.user_id is None:
            self.identify(conn.sid, None, conn.name)
        return PlayerSession(sid=conn.sid, user_id=conn.user_id, name=conn.name or "Player")

    def _require_player(self, sid: str) -> tuple[Room, PlayerSession]:
        conn = self._connections.get(sid)
        if conn is None or not conn.room_id:
            raise not_in_room()
        room = self.directory.require(conn.room_id)
        player = room.players.get(sid)
        if player is None:
            raise not_in_room()
        return room, player

    # -- membership ------------------------------------------------------

    def create_room(self, sid: str, **options: Any) -> Room:
        with self._lock:
            conn = self.connection(sid)
            self._leave_current(conn)
            room = self.directory.create(self._new_session(conn), **options)
            conn.room_id = room.id
            self._emit_players(room)
            return room

    def join_room(self, sid: str, room_id: str, password: str | None = None) -> Room:
        with self._lock:
            conn = self.connection(sid)
            current = self.directory.get(conn.room_id) if conn.room_id else None
            if current is not None and current.id == room_id and sid in current.players:
                return current

            # A rejected join leaves the current room untouched.
            room = self.directory.join(room_id, self._new_session(conn), password)
            self._leave_current(conn)
            conn.room_id = room.id
            self._emit_players(room)
            return room

    def joined_payload(self, room: Room, sid: str) -> dict:
        with self._lock:
            player = room.players.get(sid)
            payload = {
                "roomId": room.id,
                "name": room.name,
                "isHost": player is not None and player.user_id == room.host_user_id,
                "categories": list(room.categories),
                "theme": room.theme,
                "mode": room.mode,
                "capacity": room.capacity,
                "targetRounds": room.target_rounds,
            }
            payload.update(players_payload(room))
            return payload

    def list_rooms(self, public: bool = False) -> list[dict]:
        with self._lock:
            return [room_summary(r) for r in self.directory.list(public=public)]

    def leave(self, sid: str) -> str | None:
        """Leave the current room; returns the id of the room that was left."""
        with self._lock:
            conn = self._connections.get(sid)
            if conn is None:
                return None
            return self._leave_current(conn)

    def disconnect(self, sid: str) -> str | None:
        with self._lock:
            conn = self._connections.pop(sid, None)
            if conn is None:
                return None
            return self._leave_current(conn)

    def _leave_current(self, conn: Connection) -> str | None:
        room_id = conn.room_id
        conn.room_id = None
        room = self.directory.get(room_id) if room_id else None
        if room is None:
            return room_id

        was_chooser = room.phase == "awaiting_letter" and room.chooser_sid == conn.sid
        player = self.directory.remove_player(room, conn.sid)
        if player is None:
            return room.id

        logger.info("[leave] room=%s sid=%s phase=%s", room.id, conn.sid, room.phase)
        if self.directory.get(room.id) is None:
            return room.id

        self._emit_players(room)
        if room.phase == "active":
            self._emit(events.ROUND_READINESS, readiness(room), room.id)
        if was_chooser:
            self._designate_chooser(room)
        return room.id

    # -- round lifecycle -------------------------------------------------

    def start(self, sid: str) -> None:
        with self._lock:
            room, player = self._require_player(sid)
            if player.user_id != room.host_user_id:
                raise GameError("not_host", "Only the host can start the game.")
            if room.phase != "waiting":
                raise GameError("game_already_started", "The game has already started.")
            if len(room.players) < 2:
                raise GameError("not_enough_players", "At least 2 players are needed to start.")

            room.round = 1
            room.eliminated = []
            logger.info("[game-start] room=%s mode=%s players=%s", room.id, room.mode, len(room.players))
            self._begin_round(room)

    def _begin_round(self, room: Room) -> None:
        for p in room.players.values():
            p.answers = {}
        room.letter = None
        room.chooser_sid = None

        if room.mode == "rotation":
            room.phase = "awaiting_letter"
            self._designate_chooser(room)
            return

        room.letter = random_letter()
        self._activate(room)

    def _designate_chooser(self, room: Room) -> None:
        order = room.player_order()
        room.chooser_sid = order[(room.round - 1) % len(order)]
        chooser = room.players[room.chooser_sid]
        logger.info("[chooser] room=%s round=%s chooser=%s", room.id, room.round, chooser.sid)
        self._emit(
            events.ROUND_AWAITING_LETTER,
            {
                "chooserId": chooser.sid,
                "chooserName": chooser.name,
                "categories": list(room.categories),
                "roundNumber": room.round,
                "mode": room.mode,
                "roundDurationSeconds": room.round_duration_sec,
            },
            room.id,
        )

    def choose_letter(self, sid: str, letter: Any) -> str:
        with self._lock:
            room, _ = self._require_player(sid)
            if room.mode != "rotation" or room.phase != "awaiting_letter":
                raise GameError("not_choosing", "No letter is being chosen right now.")
            if sid != room.chooser_sid:
                raise GameError("not_your_turn", "It is not your turn to choose the letter.")
            chosen = sanitize_letter(letter)
            if not chosen:
                raise GameError("invalid_letter", "Choose a letter from A to Z.")

            room.letter = chosen
            self._activate(room)
            return chosen

    def _activate(self, room: Room) -> None:
        room.phase = "active"
        logger.info("[round-start] room=%s round=%s letter=%s", room.id, room.round, room.letter)
        self._emit(
            events.ROUND_STARTED,
            {
                "letter": room.letter,
                "categories": list(room.categories),
                "roundNumber": room.round,
                "mode": room.mode,
                "roundDurationSeconds": room.round_duration_sec,
            },
            room.id,
        )
        self._start_countdown(room)

    def _start_countdown(self, room: Room) -> None:
        if room.timer is not None:
            logger.warning("[timer-skip] room=%s round=%s already counting down", room.id, room.round)
            return
        room.remaining_seconds = room.round_duration_sec
        room.timer = self.scheduler.every(room.id, self.tick_interval_sec, self._on_tick)

    def _on_tick(self, room_id: str, handle) -> None:
        with self._lock:
            room = self.directory.get(room_id)
            if room is None or room.timer is not handle:
                handle.cancel()
                logger.debug("[tick-drop] room=%s", room_id)
                return

            room.remaining_seconds = max(0, room.remaining_seconds - 1)
            self._emit(events.ROUND_TICK, {"remainingSeconds": room.remaining_seconds}, room.id)
            if room.remaining_seconds <= 0:
                handle.cancel()
                room.timer = None
                logger.info("[timer-expire] room=%s round=%s", room.id, room.round)
                self._end_round(room)

    def submit_answers(self, sid: str, answers: Mapping[str, str]) -> dict:
        with self._lock:
            room, player = self._require_player(sid)
            if room.phase != "active":
                raise GameError("round_not_active", "The round is not running.")

            player.answers = {
                category: text
                for category, text in answers.items()
                if category in room.categories and isinstance(text, str)
            }
            status = readiness(room)
            self._emit(events.ROUND_READINESS, status, room.id)
            return status

    def stop(self, sid: str) -> None:
        with self._lock:
            room, player = self._require_player(sid)
            if room.phase != "active" or room.timer is None:
                raise GameError("round_not_active", "The round is not running.")
            if not player.has_answered:
                raise GameError("answers_required", "Submit your answers before calling stop.")
            status = readiness(room)
            if not status["canStop"]:
                raise GameError(
                    "not_enough_ready",
                    f"At least {status['minimumRequired']} of {status['total']} players must finish before calling stop.",
                )

            room.timer.cancel()
            room.timer = None
            room.remaining_seconds = 0
            logger.info("[stop] room=%s round=%s by=%s", room.id, room.round, sid)
            self._end_round(room)

    def _end_round(self, room: Room) -> None:
        room.phase = "reveal"
        scores = score_round(
            room.letter,
            room.categories,
            {sid: p.answers for sid, p in room.players.items()},
        )

        per_player: dict[str, dict] = {}
        per_player_answers: dict[str, dict] = {}
        for sid, p in room.players.items():
            result = scores[sid]
            p.score += result.total
            per_player[sid] = {
                "total": result.total,
                "breakdown": result.breakdown,
                "cumulative": p.score,
            }
            per_player_answers[sid] = {"name": p.name, "userId": p.user_id, "answers": dict(p.answers)}

        eliminated_now: list[dict] = []
        if room.mode == "survival":
            for sid in eliminate_lowest(room.players.values()):
                p = room.players.pop(sid)
                room.eliminated.append(EliminatedPlayer(user_id=p.user_id, name=p.name, score=p.score))
                eliminated_now.append({"socketId": p.sid, "userId": p.user_id, "name": p.name, "score": p.score})
            if eliminated_now:
                logger.info(
                    "[eliminate] room=%s round=%s eliminated=%s remaining=%s",
                    room.id,
                    room.round,
                    len(eliminated_now),
                    len(room.players),
                )

        result_payload = {
            "letter": room.letter,
            "categories": list(room.categories),
            "roundNumber": room.round,
            "scores": per_player,
            "answers": per_player_answers,
            "remainingPlayers": players_payload(room)["players"],
            "mode": room.mode,
        }
        if room.mode == "survival":
            result_payload["eliminatedThisRound"] = eliminated_now

        logger.info("[round-end] room=%s round=%s letter=%s", room.id, room.round, room.letter)
        self._emit(events.ROUND_RESULT, result_payload, room.id)
        room.reveal_timer = self.scheduler.later(room.id, self.reveal_duration_sec, self._on_reveal_elapsed)

    def _on_reveal_elapsed(self, room_id: str, handle) -> None:
        with self._lock:
            room = self.directory.get(room_id)
            if room is None or room.reveal_timer is not handle or room.phase != "reveal":
                logger.debug("[reveal-drop] room=%s", room_id)
                return
            room.reveal_timer = None
            self._advance(room)

    def _advance(self, room: Room) -> None:
        if room.mode == "survival":
            finished = len(room.players) <= 1
        else:
            finished = room.round >= room.target_rounds

        if finished:
            self._finish(room)
            return

        room.round += 1
        self._begin_round(room)

    def _finish(self, room: Room) -> None:
        if room.mode == "survival":
            ranking = survival_ranking(room.players.values(), room.eliminated)
        else:
            ranking = standings(room.players.values())

        distribute_rewards(
            self.registry,
            ranking,
            has_survivor=bool(room.players),
            victory_bonus=self.victory_bonus,
            participation_bonus=self.participation_bonus,
        )

        logger.info("[game-finish] room=%s round=%s ranked=%s", room.id, room.round, len(ranking))
        self._emit(events.GAME_FINISHED, {"ranking": ranking, "mode": room.mode}, room.id)

        for conn in self._connections.values():
            if conn.room_id == room.id:
                conn.room_id = None
        self.directory.destroy(room)
        self.broadcaster.close_room(room.id)

    # -- helpers ---------------------------------------------------------

    def _emit_players(self, room: Room) -> None:
        self._emit(events.ROOM_PLAYERS, players_payload(room), room.id)

    def _emit(self, event: str, payload: dict, to: str) -> None:
        self.broadcaster.emit(event, payload, to)
