from __future__ import annotations

import random
import string


DEFAULT_THEME = "classic"

CATEGORIES_BY_THEME: dict[str, list[str]] = {
    "classic": ["Name", "Animal", "Fruit", "Object", "Color", "City", "Profession", "Brand"],
    "fun": ["Cartoon character", "Weird food", "Hard word", "Dog name", "Surname", "Drink", "Country", "Sport"],
    "geography": ["Country", "City", "River", "Mountain", "Island", "Capital", "State", "Continent"],
    "culture": ["Movie", "Series", "Song", "Artist", "Book", "Game", "YouTuber", "Brand"],
    # Filled by the room creator.
    "custom": [],
}

DEFAULT_MODE = "classic"

ROUND_DURATION_BY_MODE: dict[str, int] = {
    "classic": 90,
    "speed": 60,
    "rotation": 90,
    "stakes": 90,
    "survival": 90,
}

MIN_CAPACITY = 2
MAX_CAPACITY = 16


def categories_for(theme: str | None, custom: list[str] | None = None) -> list[str]:
    cleaned = [c.strip() for c in (custom or []) if isinstance(c, str) and c.strip()]
    if cleaned:
        # Order kept, repeats dropped so each category is scored once.
        return list(dict.fromkeys(cleaned))
    template = CATEGORIES_BY_THEME.get(theme or "") or CATEGORIES_BY_THEME[DEFAULT_THEME]
    return list(template)


def round_duration_for(mode: str) -> int:
    return ROUND_DURATION_BY_MODE.get(mode, ROUND_DURATION_BY_MODE[DEFAULT_MODE])


def clamp_capacity(requested: int | None, default: int = 8) -> int:
    value = requested if requested else default
    return min(MAX_CAPACITY, max(MIN_CAPACITY, value))


def random_letter() -> str:
    return random.choice(string.ascii_uppercase)
