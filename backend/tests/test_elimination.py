from adedonha.game.elimination import eliminate_lowest, survival_ranking
from adedonha.game.models import EliminatedPlayer, PlayerSession


def player(sid, score):
    return PlayerSession(sid=sid, user_id=f"u-{sid}", name=sid.upper(), score=score)


def test_ties_at_minimum_are_eliminated_together():
    players = [player("a", 20), player("b", 5), player("c", 5), player("d", 10)]
    assert eliminate_lowest(players) == ["b", "c"]


def test_last_player_is_never_eliminated():
    assert eliminate_lowest([player("a", 0)]) == []
    assert eliminate_lowest([]) == []


def test_everyone_tied_is_eliminated():
    assert eliminate_lowest([player("a", 5), player("b", 5)]) == ["a", "b"]


def test_survival_ranking_puts_survivor_first_then_latest_eliminated():
    history = [
        EliminatedPlayer(user_id="u-first", name="First", score=0),
        EliminatedPlayer(user_id="u-second", name="Second", score=10),
    ]
    ranking = survival_ranking([player("a", 30)], history)
    assert [r["userId"] for r in ranking] == ["u-a", "u-second", "u-first"]
    assert ranking[0]["score"] == 30


def test_survival_ranking_without_survivor():
    history = [EliminatedPlayer(user_id="u-1", name="One", score=5)]
    assert [r["userId"] for r in survival_ranking([], history)] == ["u-1"]
