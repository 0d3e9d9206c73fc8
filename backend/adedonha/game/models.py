from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


RoomPhase = Literal["waiting", "awaiting_letter", "active", "reveal", "finished"]
GameMode = Literal["classic", "speed", "rotation", "stakes", "survival"]


@dataclass
class User:
    id: str
    name: str
    coins: int = 0
    friends: set[str] = field(default_factory=set)


@dataclass
class Connection:
    sid: str
    user_id: str | None = None
    name: str = ""
    room_id: str | None = None


@dataclass
class PlayerSession:
    sid: str
    user_id: str
    name: str
    score: int = 0
    answers: dict[str, str] = field(default_factory=dict)

    @property
    def has_answered(self) -> bool:
        return len(self.answers) > 0


@dataclass
class EliminatedPlayer:
    user_id: str
    name: str
    score: int


@dataclass
class Room:
    id: str
    host_user_id: str
    name: str
    theme: str
    mode: GameMode
    categories: list[str]
    password: str | None = None
    target_rounds: int = 5
    capacity: int = 8
    round_duration_sec: int = 90
    phase: RoomPhase = "waiting"
    round: int = 0
    letter: str | None = None
    remaining_seconds: int = 0
    # Present iff a round is counting down.
    timer: Any = None
    # Pending Reveal -> next round transition.
    reveal_timer: Any = None
    chooser_sid: str | None = None
    players: dict[str, PlayerSession] = field(default_factory=dict)
    eliminated: list[EliminatedPlayer] = field(default_factory=list)

    @property
    def has_password(self) -> bool:
        return bool(self.password)

    def player_order(self) -> list[str]:
        return list(self.players.keys())
