"""Players, units and the messages exchanged about them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class UnitRank(str, Enum):
    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"

    def __str__(self) -> str:
        return self.value


_LOCATIONS = frozenset({"americas", "europe", "africa", "asia", "australia", "antarctica"})


def all_ranks() -> frozenset[UnitRank]:
    """Every rank a unit may have."""
    return frozenset(UnitRank)


def all_locations() -> frozenset[str]:
    """Every location on the map."""
    return _LOCATIONS


@dataclass(frozen=True)
class Unit:
    id: int
    rank: UnitRank
    location: str

    def to_dict(self) -> dict[str, Any]:
        return {"ID": self.id, "Rank": self.rank.value, "Location": self.location}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Unit":
        return cls(id=int(data["ID"]), rank=UnitRank(data["Rank"]), location=data["Location"])


@dataclass
class Player:
    username: str
    units: dict[int, Unit] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Username": self.username,
            "Units": {str(unit_id): unit.to_dict() for unit_id, unit in self.units.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Player":
        units = data.get("Units") or {}
        return cls(
            username=data.get("Username", ""),
            units={int(unit_id): Unit.from_dict(unit) for unit_id, unit in units.items()},
        )


@dataclass
class ArmyMove:
    player: Player
    units: list[Unit]
    to_location: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "Player": self.player.to_dict(),
            "Units": [unit.to_dict() for unit in self.units],
            "ToLocation": self.to_location,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ArmyMove":
        return cls(
            player=Player.from_dict(data.get("Player") or {}),
            units=[Unit.from_dict(unit) for unit in data.get("Units") or []],
            to_location=data.get("ToLocation", ""),
        )


@dataclass
class RecognitionOfWar:
    attacker: Player
    defender: Player

    def to_dict(self) -> dict[str, Any]:
        return {"Attacker": self.attacker.to_dict(), "Defender": self.defender.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecognitionOfWar":
        return cls(
            attacker=Player.from_dict(data.get("Attacker") or {}),
            defender=Player.from_dict(data.get("Defender") or {}),
        )