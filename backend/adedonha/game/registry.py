from __future__ import annotations

import uuid
from threading import RLock

from .errors import GameError
from .models import User


DEFAULT_USER_NAME = "Player"


class UserRegistry:
    """Profiles, coin balances and friend links for the process lifetime."""

    def __init__(self, starting_coins: int = 100) -> None:
        self._lock = RLock()
        self._users: dict[str, User] = {}
        self.starting_coins = starting_coins

    def get(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_or_create(self, user_id: str, name: str | None = None) -> User:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                user = User(
                    id=user_id,
                    name=(name or "").strip() or DEFAULT_USER_NAME,
                    coins=self.starting_coins,
                )
                self._users[user_id] = user
            return user

    def upsert(self, user_id: str | None = None, name: str | None = None) -> User:
        with self._lock:
            uid = (user_id or "").strip() or str(uuid.uuid4())
            user = self.get_or_create(uid, name)
            if name and name.strip():
                user.name = name.strip()
            return user

    def add_coins(self, user_id: str, amount: int) -> None:
        with self._lock:
            user = self._users.get(user_id)
            if user is None or amount <= 0:
                return
            user.coins += amount

    def add_friend(self, user_id: str, friend_id: str) -> User:
        with self._lock:
            if user_id == friend_id:
                raise GameError("invalid_friend", "You cannot add yourself as a friend.")
            user = self.get_or_create(user_id)
            friend = self.get_or_create(friend_id)
            user.friends.add(friend.id)
            friend.friends.add(user.id)
            return user

    def ranking(self, limit: int = 100) -> list[dict]:
        with self._lock:
            users = sorted(self._users.values(), key=lambda u: u.coins, reverse=True)
            return [public_user(u) for u in users[:limit]]

    def friend_ranking(self, user_id: str) -> list[dict]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return []
            friends = [self._users[fid] for fid in user.friends if fid in self._users]
            friends.sort(key=lambda u: u.coins, reverse=True)
            return [public_user(u) for u in friends]


def public_user(user: User) -> dict:
    return {"userId": user.id, "name": user.name, "coins": user.coins}


def user_profile(user: User) -> dict:
    payload = public_user(user)
    payload["friends"] = sorted(user.friends)
    return payload
