import pytest

from adedonha.game.directory import RoomDirectory, room_summary
from adedonha.game.errors import GameError
from adedonha.game.models import PlayerSession
from adedonha.game.scheduler import TimerHandle
from adedonha.game.themes import CATEGORIES_BY_THEME


def session(n):
    return PlayerSession(sid=f"sid-{n}", user_id=f"user-{n}", name=f"P{n}")


@pytest.fixture()
def directory():
    return RoomDirectory()


@pytest.mark.parametrize("requested,expected", [(1, 2), (20, 16), (None, 8), (0, 8), (-3, 2), (12, 12)])
def test_capacity_is_clamped(directory, requested, expected):
    room = directory.create(session(0), capacity=requested)
    assert room.capacity == expected


def test_defaults(directory):
    room = directory.create(session(0))
    assert room.mode == "classic"
    assert room.target_rounds == 5
    assert room.round_duration_sec == 90
    assert room.categories == CATEGORIES_BY_THEME["classic"]
    assert room.host_user_id == "user-0"
    assert list(room.players) == ["sid-0"]
    assert room.phase == "waiting"


def test_categories_from_custom_list_or_theme(directory):
    assert directory.create(session(0), theme="geography").categories == CATEGORIES_BY_THEME["geography"]
    assert directory.create(session(1), theme="unknown").categories == CATEGORIES_BY_THEME["classic"]
    custom = directory.create(session(2), theme="geography", categories=["Animal", " ", "Fruit"])
    assert custom.categories == ["Animal", "Fruit"]


def test_mode_sets_round_duration(directory):
    assert directory.create(session(0), mode="speed").round_duration_sec == 60
    unknown = directory.create(session(1), mode="chaos")
    assert (unknown.mode, unknown.round_duration_sec) == ("classic", 90)


def test_join_validation_order(directory):
    room = directory.create(session(0), password="secret", capacity=2)

    with pytest.raises(GameError) as exc:
        directory.join("missing", session(1))
    assert exc.value.code == "room_not_found"

    with pytest.raises(GameError) as exc:
        directory.join(room.id, session(1), "nope")
    assert exc.value.code == "wrong_password"

    directory.join(room.id, session(1), "secret")

    with pytest.raises(GameError) as exc:
        directory.join(room.id, session(2), "secret")
    assert exc.value.code == "room_full"

    room.phase = "active"
    with pytest.raises(GameError) as exc:
        directory.join(room.id, session(3), "nope")
    assert exc.value.code == "game_already_started"


def test_host_transfers_to_first_remaining_player(directory):
    room = directory.create(session(0))
    directory.join(room.id, session(1))
    directory.join(room.id, session(2))

    directory.remove_player(room, "sid-0")

    assert room.host_user_id == "user-1"
    assert list(room.players) == ["sid-1", "sid-2"]


def test_last_player_leaving_destroys_room_and_cancels_timer(directory):
    room = directory.create(session(0))
    room.timer = TimerHandle(room.id)
    handle = room.timer

    directory.remove_player(room, "sid-0")

    assert directory.get(room.id) is None
    assert handle.cancelled
    assert room.timer is None


def test_listing(directory):
    open_room = directory.create(session(0), name="Open")
    locked = directory.create(session(1), name="Locked", password="pw")
    started = directory.create(session(2), name="Started")
    started.phase = "active"

    assert {r.id for r in directory.list()} == {open_room.id, locked.id}
    assert [r.id for r in directory.list(public=True)] == [open_room.id]
    assert room_summary(locked)["hasPassword"] is True
    assert room_summary(open_room) == {
        "id": open_room.id,
        "name": "Open",
        "theme": "classic",
        "mode": "classic",
        "playerCount": 1,
        "capacity": 8,
        "hasPassword": False,
    }


def test_repeated_custom_categories_are_dropped(directory):
    room = directory.create(session(0), categories=["Animal", "Fruit", "Animal", " Fruit "])
    assert room.categories == ["Animal", "Fruit"]


def test_unknown_theme_is_stored_as_default(directory):
    room = directory.create(session(0), theme="unknown")
    assert room.theme == "classic"
    assert room_summary(room)["theme"] == "classic"
