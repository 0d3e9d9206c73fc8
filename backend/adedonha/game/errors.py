from __future__ import annotations


class GameError(Exception):
    """A rejected player action.

    ``code`` is a stable identifier clients can switch on, ``reason`` the
    message shown to the player who made the request.
    """

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(reason)
        self.code = code
        self.reason = reason

    def to_payload(self) -> dict:
        return {"error": self.code, "reason": self.reason}


def room_not_found() -> GameError:
    return GameError("room_not_found", "Room does not exist.")


def not_in_room() -> GameError:
    return GameError("not_in_room", "You are not in a room.")
