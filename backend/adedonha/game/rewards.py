from __future__ import annotations

import logging
from typing import Iterable

from .models import PlayerSession
from .registry import UserRegistry


logger = logging.getLogger(__name__)


def standings(players: Iterable[PlayerSession]) -> list[dict]:
    """Players by cumulative score, highest first; ties keep join order."""
    ranking = [{"userId": p.user_id, "name": p.name, "score": p.score} for p in players]
    ranking.sort(key=lambda entry: entry["score"], reverse=True)
    return ranking


def distribute_rewards(
    registry: UserRegistry,
    ranking: list[dict],
    has_survivor: bool,
    victory_bonus: int,
    participation_bonus: int,
) -> None:
    if not has_survivor or not ranking:
        logger.info("[rewards-skip] no player remaining")
        return

    winner, *others = ranking
    registry.add_coins(winner["userId"], victory_bonus)
    for entry in others:
        registry.add_coins(entry["userId"], participation_bonus)

    logger.info(
        "[rewards] winner=%s bonus=%s participants=%s",
        winner["userId"],
        victory_bonus,
        len(others),
    )
