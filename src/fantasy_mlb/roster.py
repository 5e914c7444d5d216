from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import yaml

from .settings import ConfigurationError
from .stats import Role

RosterKey = Tuple[str, Role]


def normalize_name(name: str) -> str:
    return " ".join(str(name).split()).lower()


@dataclass(frozen=True)
class RosterPlayer:
    name: str
    role: Role
    team: str

    @property
    def key(self) -> RosterKey:
        return (normalize_name(self.name), self.role)

    def to_mapping(self) -> Dict[str, str]:
        return {"name": self.name, "role": self.role.value, "team": self.team}


@dataclass
class Roster:
    players: List[RosterPlayer] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._lookup: Dict[RosterKey, RosterPlayer] = {}
        for player in self.players:
            # first entry wins when a name is listed twice for the same role
            self._lookup.setdefault(player.key, player)

    def __iter__(self) -> Iterator[RosterPlayer]:
        return iter(self.players)

    def __len__(self) -> int:
        return len(self.players)

    def find(self, name: str, role: Role) -> Optional[RosterPlayer]:
        return self._lookup.get((normalize_name(name), role))

    @property
    def teams(self) -> List[str]:
        seen: Dict[str, None] = {}
        for player in self.players:
            seen.setdefault(player.team, None)
        return list(seen)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object] | None) -> "Roster":
        entries = (raw or {}).get("players") if isinstance(raw, Mapping) else None
        if not isinstance(entries, list):
            raise ConfigurationError("Roster document must contain a 'players' list")

        players: List[RosterPlayer] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                raise ConfigurationError(f"Roster entry #{index + 1} must be a mapping")
            name = str(entry.get("name") or "").strip()
            team = str(entry.get("team") or "").strip()
            if not name or not team:
                raise ConfigurationError(f"Roster entry #{index + 1} requires both name and team")
            try:
                role = Role.parse(str(entry.get("role") or Role.BATTER.value))
            except ValueError as exc:
                raise ConfigurationError(f"Roster entry #{index + 1}: {exc}") from None
            players.append(RosterPlayer(name=name, role=role, team=team))
        return cls(players=players)

    @classmethod
    def load(cls, path: Path) -> "Roster":
        if not path.exists():
            raise ConfigurationError(f"Roster not found at {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Roster at {path} is not valid YAML: {exc}") from exc
        return cls.from_mapping(raw)

    def to_mapping(self) -> Dict[str, List[Dict[str, str]]]:
        return {"players": [player.to_mapping() for player in self.players]}

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(self.to_mapping(), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        return path


def build_roster(teams: Iterable[Tuple[str, Iterable[str], Iterable[str]]]) -> Roster:
    """Build a roster from (team, batter names, pitcher names) triples."""

    players: List[RosterPlayer] = []
    for team, batters, pitchers in teams:
        players.extend(RosterPlayer(name=name, role=Role.BATTER, team=team) for name in batters)
        players.extend(RosterPlayer(name=name, role=Role.PITCHER, team=team) for name in pitchers)
    return Roster(players=players)


def sample_roster() -> Roster:
    return build_roster(
        [
            ("LA Bulls", ["Cody Bellinger", "Domingo Santana"], ["Blake Snell", "Max Scherzer"]),
            ("Chicago Pizzas", ["Christian Yelich", "Tim Beckham"], ["Jacob deGrom", "Carlos Rodón"]),
            ("NY Hotdogs", ["Trey Mancini", "Anthony Rendon"], ["José Berríos", "Mike Clevinger"]),
            ("Seattle Coffees", ["Jonathan Villar", "Rhys Hoskins"], ["Kirby Yates", "Josh Hader"]),
        ]
    )
