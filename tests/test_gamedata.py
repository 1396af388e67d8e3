import json

import pytest

from peril.gamedata import (
    ArmyMove,
    Player,
    RecognitionOfWar,
    Unit,
    UnitRank,
    all_locations,
    all_ranks,
)


def _player():
    return Player(
        "alice",
        {
            1: Unit(1, UnitRank.INFANTRY, "europe"),
            2: Unit(2, UnitRank.ARTILLERY, "asia"),
        },
    )


def test_all_ranks():
    assert {rank.value for rank in all_ranks()} == {"infantry", "cavalry", "artillery"}


def test_all_locations():
    assert all_locations() == {"americas", "europe", "africa", "asia", "australia", "antarctica"}


def test_unknown_rank_rejected():
    with pytest.raises(ValueError):
        UnitRank("tank")


def test_unit_round_trip():
    unit = Unit(7, UnitRank.CAVALRY, "africa")
    assert Unit.from_dict(unit.to_dict()) == unit


def test_unit_wire_rank_is_plain_string():
    assert Unit(3, UnitRank.CAVALRY, "asia").to_dict()["Rank"] == "cavalry"


def test_player_round_trip_through_json():
    player = _player()
    back = Player.from_dict(json.loads(json.dumps(player.to_dict())))
    assert back == player
    assert set(back.units) == {1, 2}


def test_player_unit_keys_are_strings_on_wire():
    assert set(_player().to_dict()["Units"]) == {"1", "2"}


def test_player_null_units():
    assert Player.from_dict({"Username": "bob", "Units": None}) == Player("bob", {})


def test_army_move_round_trip():
    player = _player()
    move = ArmyMove(player, list(player.units.values()), "asia")
    assert ArmyMove.from_dict(json.loads(json.dumps(move.to_dict()))) == move


def test_recognition_of_war_round_trip():
    war = RecognitionOfWar(_player(), Player("bob", {1: Unit(1, UnitRank.INFANTRY, "europe")}))
    assert RecognitionOfWar.from_dict(war.to_dict()) == war