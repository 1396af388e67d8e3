"""A player's view of the game and the commands that change it."""

from __future__ import annotations

import dataclasses
import re
import threading
from enum import IntEnum
from typing import Iterable, Optional

from peril.gamedata import (
    ArmyMove,
    Player,
    RecognitionOfWar,
    Unit,
    UnitRank,
    all_locations,
    all_ranks,
)
from peril.routing import PlayingState

_SEPARATOR = "------------------------"
_INTEGER = re.compile(r"[+-]?[0-9]+")
_POWER = {UnitRank.ARTILLERY: 10, UnitRank.CAVALRY: 5, UnitRank.INFANTRY: 1}


class GameError(Exception):
    """A command could not be carried out."""


class MoveOutcome(IntEnum):
    SAME_PLAYER = 0
    SAFE = 1
    MAKE_WAR = 2


class WarOutcome(IntEnum):
    NOT_INVOLVED = 0
    NO_UNITS = 1
    YOU_WON = 2
    OPPONENT_WON = 3
    DRAW = 4


def overlapping_location(first: Player, second: Player) -> Optional[str]:
    """The first location where both players have units, if any."""
    theirs = {unit.location for unit in second.units.values()}
    return next((u.location for u in first.units.values() if u.location in theirs), None)


def units_to_power_level(units: Iterable[Unit]) -> int:
    return sum(_POWER.get(unit.rank, 0) for unit in units)


class GameState:
    """Thread-safe state of the local player."""

    def __init__(self, username: str) -> None:
        self.player = Player(username, {})
        self.paused = False
        self._lock = threading.RLock()

    @property
    def username(self) -> str:
        return self.player.username

    def pause_game(self) -> None:
        with self._lock:
            self.paused = True

    def resume_game(self) -> None:
        with self._lock:
            self.paused = False

    def is_paused(self) -> bool:
        with self._lock:
            return self.paused

    def add_unit(self, unit: Unit) -> None:
        with self._lock:
            self.player.units[unit.id] = unit

    def update_unit(self, unit: Unit) -> None:
        with self._lock:
            self.player.units[unit.id] = unit

    def remove_units_in_location(self, location: str) -> None:
        with self._lock:
            self.player.units = {
                uid: unit for uid, unit in self.player.units.items() if unit.location != location
            }

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        with self._lock:
            return self.player.units.get(unit_id)

    def units_snapshot(self) -> list[Unit]:
        with self._lock:
            return list(self.player.units.values())

    def player_snapshot(self) -> Player:
        with self._lock:
            return Player(self.player.username, dict(self.player.units))

    def command_status(self) -> None:
        if self.is_paused():
            print("The game is paused.")
            return
        print("The game is not paused.")
        player = self.player_snapshot()
        print(f"You are {player.username}, and you have {len(player.units)} units.")
        for unit in player.units.values():
            print(f"* {unit.id}: {unit.location}, {unit.rank.value}")

    def command_spawn(self, words: list[str]) -> Unit:
        if len(words) < 3:
            raise GameError("usage: spawn <location> <rank>")
        location, rank = words[1], words[2]
        if location not in all_locations():
            raise GameError(f"error: {location} is not a valid location")
        if rank not in {r.value for r in all_ranks()}:
            raise GameError(f"error: {rank} is not a valid unit")
        with self._lock:
            unit = Unit(len(self.player.units) + 1, UnitRank(rank), location)
            self.add_unit(unit)
        print(f"Spawned a(n) {rank} in {location} with id {unit.id}")
        return unit

    def command_move(self, words: list[str]) -> ArmyMove:
        if self.is_paused():
            raise GameError("the game is paused, you can not move units")
        if len(words) < 3:
            raise GameError("usage: move <location> <unitID> <unitID> <unitID> etc")
        location = words[1]
        if location not in all_locations():
            raise GameError(f"error: {location} is not a valid location")
        unit_ids = []
        for word in words[2:]:
            if not _INTEGER.fullmatch(word):
                raise GameError(f"error: {word} is not a valid unit ID")
            unit_ids.append(int(word))

        moved = []
        for unit_id in unit_ids:
            unit = self.get_unit(unit_id)
            if unit is None:
                raise GameError(f"error: unit with ID {unit_id} not found")
            unit = dataclasses.replace(unit, location=location)
            self.update_unit(unit)
            moved.append(unit)

        move = ArmyMove(player=self.player_snapshot(), units=moved, to_location=location)
        print(f"Moved {len(move.units)} units to {move.to_location}")
        return move

    def handle_move(self, move: ArmyMove) -> MoveOutcome:
        try:
            player = self.player_snapshot()
            print()
            print("==== Move Detected ====")
            print(f"{move.player.username} is moving {len(move.units)} unit(s) to {move.to_location}")
            for unit in move.units:
                print(f"* {unit.rank.value}")
            if player.username == move.player.username:
                return MoveOutcome.SAME_PLAYER
            location = overlapping_location(player, move.player)
            if location is not None:
                print(f"You have units in {location}! You are at war with {move.player.username}!")
                return MoveOutcome.MAKE_WAR
            print(f"You are safe from {move.player.username}'s units.")
            return MoveOutcome.SAFE
        finally:
            print(_SEPARATOR)

    def handle_pause(self, state: PlayingState) -> None:
        try:
            print()
            if state.is_paused:
                print("==== Pause Detected ====")
                self.pause_game()
            else:
                print("==== Resume Detected ====")
                self.resume_game()
        finally:
            print(_SEPARATOR)

    def handle_war(
        self, recognition: RecognitionOfWar
    ) -> tuple[WarOutcome, Optional[str], Optional[str]]:
        """Fight a war this player started; returns (outcome, winner, loser)."""
        attacker, defender = recognition.attacker, recognition.defender
        try:
            print()
            print("==== War Declared ====")
            print(f"{attacker.username} has declared war on {defender.username}!")
            player = self.player_snapshot()

            if player.username == defender.username:
                print(f"{player.username}, you published the war.")
                return WarOutcome.NOT_INVOLVED, None, None
            if player.username != attacker.username:
                print(f"{player.username}, you are not involved in this war.")
                return WarOutcome.NOT_INVOLVED, None, None

            location = overlapping_location(attacker, defender)
            if location is None:
                print("Error! No units are in the same location. No war will be fought.")
                return WarOutcome.NO_UNITS, None, None

            attacker_units = [u for u in attacker.units.values() if u.location == location]
            defender_units = [u for u in defender.units.values() if u.location == location]
            for side, units in ((attacker, attacker_units), (defender, defender_units)):
                print(f"{side.username}'s units:")
                for unit in units:
                    print(f"  * {unit.rank.value}")
            attacker_power = units_to_power_level(attacker_units)
            defender_power = units_to_power_level(defender_units)
            print(f"Attacker has a power level of {attacker_power}")
            print(f"Defender has a power level of {defender_power}")

            if attacker_power > defender_power:
                print(f"{attacker.username} has won the war!")
                return WarOutcome.YOU_WON, attacker.username, defender.username
            if defender_power > attacker_power:
                print(f"{defender.username} has won the war!")
                print("You have lost the war!")
                self.remove_units_in_location(location)
                print(f"Your units in {location} have been killed.")
                return WarOutcome.OPPONENT_WON, defender.username, attacker.username
            print("The war ended in a draw!")
            print(f"Your units in {location} have been killed.")
            self.remove_units_in_location(location)
            return WarOutcome.DRAW, attacker.username, defender.username
        finally:
            print(_SEPARATOR)