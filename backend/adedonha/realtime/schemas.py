from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


MAX_TARGET_ROUNDS = 50
MAX_CATEGORIES = 20
MAX_CATEGORY_LENGTH = 40
MAX_ANSWER_LENGTH = 80


def _lenient_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class IdentifyPayload(_Payload):
    userId: str | None = Field(default=None, max_length=64)
    name: str | None = Field(default=None, max_length=32)


class CreateRoomPayload(_Payload):
    name: str | None = Field(default=None, max_length=64)
    password: str | None = Field(default=None, max_length=64)
    theme: str | None = Field(default=None, max_length=32)
    categories: list[str] | None = None
    targetRounds: int | None = None
    capacity: int | None = None
    mode: str | None = Field(default=None, max_length=32)

    @field_validator("categories", mode="before")
    @classmethod
    def clean_categories(cls, value: Any) -> list[str] | None:
        if not isinstance(value, list):
            return None
        cleaned = [c.strip()[:MAX_CATEGORY_LENGTH] for c in value if isinstance(c, str) and c.strip()]
        return cleaned[:MAX_CATEGORIES]

    @field_validator("targetRounds", mode="before")
    @classmethod
    def clamp_target_rounds(cls, value: Any) -> int | None:
        rounds = _lenient_int(value)
        if rounds is None or rounds < 1:
            return None
        return min(rounds, MAX_TARGET_ROUNDS)

    @field_validator("capacity", mode="before")
    @classmethod
    def coerce_capacity(cls, value: Any) -> int | None:
        return _lenient_int(value)

    def room_options(self) -> dict:
        return {
            "name": self.name,
            "password": self.password,
            "theme": self.theme,
            "categories": self.categories,
            "target_rounds": self.targetRounds,
            "capacity": self.capacity,
            "mode": self.mode,
        }


class JoinRoomPayload(_Payload):
    roomId: str = Field(min_length=1, max_length=64)
    password: str | None = Field(default=None, max_length=64)


class ChooseLetterPayload(_Payload):
    letter: str = Field(default="", max_length=8)


class SubmitAnswersPayload(_Payload):
    answers: dict[str, str] = Field(default_factory=dict)

    @field_validator("answers", mode="before")
    @classmethod
    def keep_text_answers(cls, value: Any) -> dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return {
            k: v[:MAX_ANSWER_LENGTH]
            for k, v in value.items()
            if isinstance(k, str) and isinstance(v, str)
        }


class UpsertUserRequest(_Payload):
    userId: str | None = Field(default=None, max_length=64)
    name: str | None = Field(default=None, max_length=32)


class AddFriendRequest(_Payload):
    userId: str = Field(min_length=1, max_length=64)
    friendId: str = Field(min_length=1, max_length=64)
