from __future__ import annotations

from typing import Iterable

from .models import EliminatedPlayer, PlayerSession


def eliminate_lowest(players: Iterable[PlayerSession]) -> list[str]:
    """Return the ids of every player tied at the lowest cumulative score.

    Nothing is eliminated once a single player (or none) remains.
    """
    remaining = list(players)
    if len(remaining) <= 1:
        return []
    lowest = min(p.score for p in remaining)
    return [p.sid for p in remaining if p.score == lowest]


def survival_ranking(
    survivors: Iterable[PlayerSession],
    history: list[EliminatedPlayer],
) -> list[dict]:
    ranking = [{"userId": p.user_id, "name": p.name, "score": p.score} for p in survivors]
    for entry in reversed(history):
        ranking.append({"userId": entry.user_id, "name": entry.name, "score": entry.score})
    return ranking
