"""Raw per-game statistics and the innings-pitched arithmetic they rely on."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional

PITCHER_POSITIONS = frozenset({"SP", "RP"})
FREE_AGENT_TEAM = "<FA>"


class Role(str, Enum):
    BATTER = "Batter"
    PITCHER = "Pitcher"

    @classmethod
    def parse(cls, value: str) -> "Role":
        cleaned = str(value).strip().lower()
        for role in cls:
            if role.value.lower() == cleaned:
                return role
        raise ValueError(f"Unknown player role: {value!r}")

    @classmethod
    def from_primary_position(cls, primary_position: str) -> "Role":
        if str(primary_position).upper() in PITCHER_POSITIONS:
            return cls.PITCHER
        return cls.BATTER


class InvalidInningsError(ValueError):
    """Raised when an innings-pitched value is not in thirds notation (.0/.1/.2)."""


def innings_to_outs(innings_pitched: float) -> int:
    """Convert thirds notation (6.2 = six innings and two outs) into recorded outs."""

    if innings_pitched < 0:
        raise InvalidInningsError(f"Innings pitched cannot be negative: {innings_pitched}")
    tenths = round(innings_pitched * 10)
    if abs(innings_pitched * 10 - tenths) > 1e-6:
        raise InvalidInningsError(f"Innings pitched has more than one decimal place: {innings_pitched}")
    whole, frac = divmod(tenths, 10)
    if frac > 2:
        raise InvalidInningsError(
            f"Innings pitched fraction must be .0, .1 or .2, got {innings_pitched}"
        )
    return whole * 3 + frac


def add_innings(a: float, b: float) -> float:
    """Sum two innings-pitched values, rolling extra thirds into whole innings.

    1.2 + 1.2 sums to 2.4 as decimals; the fraction .4 is renormalized to 3.1.
    """

    innings_to_outs(a)
    innings_to_outs(b)
    ip = a + b
    frac = round(ip % 1, 1)
    if frac > 0.2:
        return round((ip + 1 - 0.3) * 10) / 10
    return round(ip * 10) / 10


def _count_fields(cls: type) -> list[str]:
    return [f.name for f in fields(cls)]


def _counts_from_mapping(cls: type, raw: Mapping[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name in _count_fields(cls):
        value = raw.get(name)
        if value is None:
            continue
        values[name] = value
    return values


@dataclass
class BatterStats:
    at_bats: int = 0
    runs: int = 0
    hits: int = 0
    singles: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    runs_batted_in: int = 0
    sacrifice_hits: int = 0
    stolen_bases: int = 0
    caught_stealing: int = 0
    walks: int = 0
    intentional_walks: int = 0
    hit_by_pitch: int = 0
    strikeouts: int = 0
    ground_into_double_play: int = 0
    total_bases: int = 0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BatterStats":
        return cls(**{k: int(v) for k, v in _counts_from_mapping(cls, raw).items()})

    def to_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in _count_fields(BatterStats)}

    def __add__(self, other: "BatterStats") -> "BatterStats":
        if not isinstance(other, BatterStats):
            return NotImplemented
        return BatterStats(
            **{name: getattr(self, name) + getattr(other, name) for name in _count_fields(BatterStats)}
        )


@dataclass
class PitcherStats:
    innings_pitched: float = 0.0
    wins: int = 0
    losses: int = 0
    complete_games: int = 0
    shutouts: int = 0
    saves: int = 0
    outs: int = 0
    hits: int = 0
    earned_runs: int = 0
    home_runs: int = 0
    walks: int = 0
    intentional_walks: int = 0
    hit_batters: int = 0
    strikeouts: int = 0
    stolen_bases_allowed: int = 0
    batters_grounded_into_double_plays: int = 0
    total_bases_allowed: int = 0

    def __post_init__(self) -> None:
        self.innings_pitched = float(self.innings_pitched)
        innings_to_outs(self.innings_pitched)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "PitcherStats":
        values = _counts_from_mapping(cls, raw)
        converted = {k: (float(v) if k == "innings_pitched" else int(v)) for k, v in values.items()}
        return cls(**converted)

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in _count_fields(PitcherStats)}

    def __add__(self, other: "PitcherStats") -> "PitcherStats":
        if not isinstance(other, PitcherStats):
            return NotImplemented
        summed: Dict[str, Any] = {}
        for name in _count_fields(PitcherStats):
            if name == "innings_pitched":
                summed[name] = add_innings(self.innings_pitched, other.innings_pitched)
            else:
                summed[name] = getattr(self, name) + getattr(other, name)
        return PitcherStats(**summed)


def _add_optional(a, b):
    if a is None:
        return b
    if b is None:
        return a
    return a + b


@dataclass
class Player:
    """One player's raw statistics for one date (or merged across several)."""

    name: str
    position: str
    primary_position: str
    batter_stats: Optional[BatterStats] = None
    pitcher_stats: Optional[PitcherStats] = None

    @property
    def role(self) -> Role:
        return Role.from_primary_position(self.primary_position)

    @property
    def merge_key(self) -> tuple[str, str]:
        return (self.name, self.primary_position)

    def merged_with(self, other: "Player") -> "Player":
        return Player(
            name=self.name,
            position=self.position,
            primary_position=self.primary_position,
            batter_stats=_add_optional(self.batter_stats, other.batter_stats),
            pitcher_stats=_add_optional(self.pitcher_stats, other.pitcher_stats),
        )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Player":
        batter = raw.get("batter_stats")
        pitcher = raw.get("pitcher_stats")
        return cls(
            name=str(raw.get("name", "")),
            position=str(raw.get("position", "")),
            primary_position=str(raw.get("primary_position", "")),
            batter_stats=BatterStats.from_dict(batter) if batter else None,
            pitcher_stats=PitcherStats.from_dict(pitcher) if pitcher else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "position": self.position,
            "primary_position": self.primary_position,
            "batter_stats": self.batter_stats.to_dict() if self.batter_stats else None,
            "pitcher_stats": self.pitcher_stats.to_dict() if self.pitcher_stats else None,
        }


@dataclass
class FantasyPlayer:
    team: str
    player: Player
    fantasy_points: float = field(default=0.0)

    @property
    def role(self) -> Role:
        return self.player.role
