import pytest

from peril.gamedata import ArmyMove, Player, RecognitionOfWar, Unit, UnitRank
from peril.gamestate import (
    GameError,
    GameState,
    MoveOutcome,
    WarOutcome,
    overlapping_location,
    units_to_power_level,
)
from peril.routing import PlayingState


def _player(name, *units):
    return Player(name, {unit.id: unit for unit in units})


def test_spawn_assigns_sequential_ids():
    state = GameState("alice")
    first = state.command_spawn(["spawn", "europe", "infantry"])
    second = state.command_spawn(["spawn", "asia", "artillery"])
    assert (first.id, second.id) == (1, 2)
    assert state.get_unit(2) == Unit(2, UnitRank.ARTILLERY, "asia")


@pytest.mark.parametrize(
    "words, message",
    [
        (["spawn", "europe"], "usage: spawn <location> <rank>"),
        (["spawn", "mars", "infantry"], "error: mars is not a valid location"),
        (["spawn", "europe", "tank"], "error: tank is not a valid unit"),
    ],
)
def test_spawn_errors(words, message):
    state = GameState("alice")
    with pytest.raises(GameError) as info:
        state.command_spawn(words)
    assert str(info.value) == message
    assert state.units_snapshot() == []


def test_move_updates_units():
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "infantry"])
    state.command_spawn(["spawn", "europe", "cavalry"])
    move = state.command_move(["move", "asia", "1", "2"])
    assert move.to_location == "asia"
    assert [u.location for u in move.units] == ["asia", "asia"]
    assert all(u.location == "asia" for u in state.units_snapshot())
    assert move.player == state.player_snapshot()


@pytest.mark.parametrize(
    "words, message",
    [
        (["move", "asia"], "usage: move <location> <unitID> <unitID> <unitID> etc"),
        (["move", "mars", "1"], "error: mars is not a valid location"),
        (["move", "asia", "x"], "error: x is not a valid unit ID"),
        (["move", "asia", "9"], "error: unit with ID 9 not found"),
    ],
)
def test_move_errors(words, message):
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "infantry"])
    with pytest.raises(GameError) as info:
        state.command_move(words)
    assert str(info.value) == message


def test_move_refused_while_paused():
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "infantry"])
    state.handle_pause(PlayingState(is_paused=True))
    with pytest.raises(GameError, match="the game is paused"):
        state.command_move(["move", "asia", "1"])


def test_pause_and_resume():
    state = GameState("alice")
    state.handle_pause(PlayingState(is_paused=True))
    assert state.is_paused() is True
    state.handle_pause(PlayingState(is_paused=False))
    assert state.is_paused() is False


def test_status_when_paused(capsys):
    state = GameState("alice")
    state.pause_game()
    state.command_status()
    assert capsys.readouterr().out == "The game is paused.\n"


def test_status_lists_units(capsys):
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "infantry"])
    capsys.readouterr()
    state.command_status()
    out = capsys.readouterr().out
    assert "You are alice, and you have 1 units." in out
    assert "* 1: europe, infantry" in out


def test_handle_move_outcomes():
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "infantry"])
    own = state.command_move(["move", "europe", "1"])
    assert state.handle_move(own) == MoveOutcome.SAME_PLAYER
    enemy = _player("bob", Unit(1, UnitRank.CAVALRY, "europe"))
    assert state.handle_move(ArmyMove(enemy, list(enemy.units.values()), "europe")) == MoveOutcome.MAKE_WAR
    far = _player("bob", Unit(1, UnitRank.CAVALRY, "asia"))
    assert state.handle_move(ArmyMove(far, list(far.units.values()), "asia")) == MoveOutcome.SAFE


def test_overlapping_location():
    first = _player("a", Unit(1, UnitRank.INFANTRY, "asia"))
    second = _player("b", Unit(1, UnitRank.INFANTRY, "asia"), Unit(2, UnitRank.INFANTRY, "africa"))
    assert overlapping_location(first, second) == "asia"
    assert overlapping_location(first, _player("c", Unit(1, UnitRank.INFANTRY, "europe"))) is None


def test_power_levels():
    assert units_to_power_level([Unit(1, UnitRank.ARTILLERY, "asia")]) == 10
    assert units_to_power_level([Unit(1, UnitRank.CAVALRY, "asia")]) == 5
    assert units_to_power_level([Unit(1, UnitRank.INFANTRY, "asia")]) == 1
    assert units_to_power_level([]) == 0


def test_war_not_involved():
    state = GameState("carol")
    war = RecognitionOfWar(_player("alice"), _player("bob"))
    assert state.handle_war(war) == (WarOutcome.NOT_INVOLVED, None, None)


def test_war_defender_published():
    state = GameState("bob")
    war = RecognitionOfWar(_player("alice"), _player("bob"))
    assert state.handle_war(war) == (WarOutcome.NOT_INVOLVED, None, None)


def test_war_no_units():
    state = GameState("alice")
    war = RecognitionOfWar(
        _player("alice", Unit(1, UnitRank.INFANTRY, "asia")),
        _player("bob", Unit(1, UnitRank.INFANTRY, "europe")),
    )
    assert state.handle_war(war) == (WarOutcome.NO_UNITS, None, None)


def test_war_attacker_wins():
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "artillery"])
    war = RecognitionOfWar(
        state.player_snapshot(), _player("bob", Unit(1, UnitRank.INFANTRY, "europe"))
    )
    assert state.handle_war(war) == (WarOutcome.YOU_WON, "alice", "bob")
    assert len(state.units_snapshot()) == 1


def test_war_defender_wins_kills_units():
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "infantry"])
    state.command_spawn(["spawn", "asia", "infantry"])
    war = RecognitionOfWar(
        state.player_snapshot(), _player("bob", Unit(1, UnitRank.ARTILLERY, "europe"))
    )
    assert state.handle_war(war) == (WarOutcome.OPPONENT_WON, "bob", "alice")
    assert [u.location for u in state.units_snapshot()] == ["asia"]


def test_war_draw_kills_units():
    state = GameState("alice")
    state.command_spawn(["spawn", "europe", "cavalry"])
    war = RecognitionOfWar(
        state.player_snapshot(), _player("bob", Unit(1, UnitRank.CAVALRY, "europe"))
    )
    assert state.handle_war(war) == (WarOutcome.DRAW, "alice", "bob")
    assert state.units_snapshot() == []


def test_player_snapshot_is_independent():
    state = GameState("alice")
    snap = state.player_snapshot()
    state.command_spawn(["spawn", "europe", "infantry"])
    assert snap.units == {}
    assert state.username == "alice"