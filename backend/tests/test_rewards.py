from adedonha.game.models import PlayerSession
from adedonha.game.rewards import distribute_rewards, standings


def test_standings_sort_by_score_and_keep_join_order_on_ties():
    players = [
        PlayerSession(sid="a", user_id="ua", name="A", score=10),
        PlayerSession(sid="b", user_id="ub", name="B", score=30),
        PlayerSession(sid="c", user_id="uc", name="C", score=10),
    ]
    assert [r["userId"] for r in standings(players)] == ["ub", "ua", "uc"]


def test_winner_gets_victory_bonus_and_others_participation(registry):
    for uid in ("ua", "ub", "uc"):
        registry.get_or_create(uid)
    ranking = [{"userId": "ub"}, {"userId": "ua"}, {"userId": "uc"}]

    distribute_rewards(registry, ranking, has_survivor=True, victory_bonus=50, participation_bonus=5)

    assert registry.get("ub").coins == 150
    assert registry.get("ua").coins == 105
    assert registry.get("uc").coins == 105


def test_no_rewards_without_survivor(registry):
    registry.get_or_create("ua")
    distribute_rewards(registry, [{"userId": "ua"}], has_survivor=False, victory_bonus=50, participation_bonus=5)
    assert registry.get("ua").coins == 100
