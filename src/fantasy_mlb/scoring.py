from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

import yaml

from .settings import ConfigurationError
from .stats import Player, innings_to_outs

COMMON_HEADER_ITEMS = ("Player", "Team", "FanPts", "Pos")

# Canonical column order: (stat attribute, column code)
BATTER_STATS: Tuple[Tuple[str, str], ...] = (
    ("at_bats", "B.AB"),
    ("runs", "B.R"),
    ("hits", "B.H"),
    ("singles", "B.1B"),
    ("doubles", "B.2B"),
    ("triples", "B.3B"),
    ("home_runs", "B.HR"),
    ("runs_batted_in", "B.RBI"),
    ("sacrifice_hits", "B.SAC"),
    ("stolen_bases", "B.SB"),
    ("caught_stealing", "B.CS"),
    ("walks", "B.BB"),
    ("intentional_walks", "B.IBB"),
    ("hit_by_pitch", "B.HBP"),
    ("strikeouts", "B.K"),
    ("ground_into_double_play", "B.GIDP"),
    ("total_bases", "B.TB"),
)

PITCHER_STATS: Tuple[Tuple[str, str], ...] = (
    ("innings_pitched", "P.IP"),
    ("wins", "P.W"),
    ("losses", "P.L"),
    ("complete_games", "P.CG"),
    ("shutouts", "P.SHO"),
    ("saves", "P.SV"),
    ("outs", "P.OUT"),
    ("hits", "P.H"),
    ("earned_runs", "P.ER"),
    ("home_runs", "P.HR"),
    ("walks", "P.BB"),
    ("intentional_walks", "P.IBB"),
    ("hit_batters", "P.HBP"),
    ("strikeouts", "P.K"),
    ("stolen_bases_allowed", "P.SB"),
    ("batters_grounded_into_double_plays", "P.GIDP"),
    ("total_bases_allowed", "P.TB"),
)

BATTER_STAT_NAMES = tuple(name for name, _ in BATTER_STATS)
PITCHER_STAT_NAMES = tuple(name for name, _ in PITCHER_STATS)


def _clean_weights(raw: object, allowed: Tuple[str, ...], role: str) -> Mapping[str, float]:
    if raw is not None and not isinstance(raw, Mapping):
        raise ConfigurationError(f"Scoring rule section '{role}' must map statistics to weights")
    weights = {name: 0.0 for name in allowed}
    for stat, value in (raw or {}).items():
        if stat not in weights:
            raise ConfigurationError(f"Unknown {role} statistic '{stat}' in scoring rule")
        if value is None or value == "":
            continue
        try:
            weights[stat] = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Weight for {role}.{stat} must be numeric, got {value!r}"
            ) from None
    return MappingProxyType(weights)


@dataclass(frozen=True)
class ScoringRule:
    """Per-statistic point weights for batters and pitchers. Missing stats weigh 0."""

    batter: Mapping[str, float] = field(default_factory=dict)
    pitcher: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "batter", _clean_weights(self.batter, BATTER_STAT_NAMES, "batter"))
        object.__setattr__(self, "pitcher", _clean_weights(self.pitcher, PITCHER_STAT_NAMES, "pitcher"))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> "ScoringRule":
        raw = raw or {}
        if not isinstance(raw, Mapping):
            raise ConfigurationError("Scoring rule must be a mapping with 'batter' and 'pitcher' sections")
        return cls(batter=raw.get("batter"), pitcher=raw.get("pitcher"))

    @classmethod
    def load(cls, path: Path) -> "ScoringRule":
        if not path.exists():
            raise ConfigurationError(f"Scoring rule not found at {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Scoring rule at {path} is not valid YAML: {exc}") from exc
        return cls.from_mapping(raw)

    def to_mapping(self) -> Dict[str, Dict[str, float]]:
        return {"batter": dict(self.batter), "pitcher": dict(self.pitcher)}

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(self.to_mapping(), sort_keys=False), encoding="utf-8")
        return path

    def header_items(self) -> List[str]:
        items = list(COMMON_HEADER_ITEMS)
        items.extend(code for name, code in BATTER_STATS if self.batter[name] != 0.0)
        items.extend(code for name, code in PITCHER_STATS if self.pitcher[name] != 0.0)
        return items

    def header_items_for_batter(self) -> List[str]:
        return [item for item in self.header_items() if not item.startswith("P.")]

    def header_items_for_pitcher(self) -> List[str]:
        return [item for item in self.header_items() if not item.startswith("B.")]


def inning_score(innings_pitched: float, weight: float) -> float:
    """Points for innings pitched, where .1 and .2 are thirds of an inning."""

    whole, frac = divmod(innings_to_outs(innings_pitched), 3)
    if frac == 0:
        return whole * weight
    if frac == 1:
        return whole * weight + weight / 3
    return whole * weight + weight * 2 / 3


def fantasy_points(player: Player, rule: ScoringRule) -> float:
    points = 0.0
    batter = player.batter_stats
    if batter is not None:
        for name in BATTER_STAT_NAMES:
            points += getattr(batter, name) * rule.batter[name]

    pitcher = player.pitcher_stats
    if pitcher is not None:
        points += inning_score(pitcher.innings_pitched, rule.pitcher["innings_pitched"])
        for name in PITCHER_STAT_NAMES:
            if name == "innings_pitched":
                continue
            points += getattr(pitcher, name) * rule.pitcher[name]
    return points


def sample_scoring_rule() -> ScoringRule:
    return ScoringRule(
        batter={
            "runs": 2.0,
            "hits": 0.5,
            "home_runs": 4.0,
            "runs_batted_in": 2.0,
            "stolen_bases": 2.0,
        },
        pitcher={
            "innings_pitched": 1.0,
            "wins": 5.0,
            "saves": 5.0,
            "earned_runs": -0.5,
            "strikeouts": 2.0,
        },
    )
