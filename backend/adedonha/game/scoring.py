from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Mapping


POINTS_INVALID = 0
POINTS_SHARED = 5
POINTS_UNIQUE = 10


@dataclass
class RoundScore:
    total: int = 0
    breakdown: dict[str, int] = field(default_factory=dict)


def _first_letter(text: str) -> str:
    stripped = text.strip()
    if not stripped:
        return ""
    return stripped[0].upper()[:1]


def is_valid_answer(text: str | None, letter: str | None) -> bool:
    """True when the trimmed answer is non-empty and starts with ``letter``."""
    if not text or not letter:
        return False
    expected = letter.strip().upper()[:1]
    return bool(expected) and _first_letter(text) == expected


def dedup_key(category: str, text: str) -> tuple[str, str]:
    return category, text.strip().lower()


def score_round(
    letter: str | None,
    categories: list[str],
    answers_by_player: Mapping[str, Mapping[str, str]],
) -> dict[str, RoundScore]:
    """Score one round.

    Every valid answer is grouped with identical answers (same category,
    same trimmed lower-cased text) from other players. A valid answer alone
    in its group earns 10 points, a shared one 5, anything else 0.
    """
    categories = list(dict.fromkeys(categories))
    groups: dict[tuple[str, str], set[str]] = defaultdict(set)
    for player_id, answers in answers_by_player.items():
        for category in categories:
            text = answers.get(category) or ""
            if is_valid_answer(text, letter):
                groups[dedup_key(category, text)].add(player_id)

    scores: dict[str, RoundScore] = {}
    for player_id, answers in answers_by_player.items():
        result = RoundScore()
        for category in categories:
            text = answers.get(category) or ""
            points = POINTS_INVALID
            if is_valid_answer(text, letter):
                occupants = groups.get(dedup_key(category, text), set())
                if len(occupants) == 1:
                    points = POINTS_UNIQUE
                elif len(occupants) > 1:
                    points = POINTS_SHARED
            result.breakdown[category] = points
            result.total += points
        scores[player_id] = result
    return scores
