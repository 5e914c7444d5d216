"""Resolve report date ranges against a season calendar.

The season start, the dates without games and the week shift exceptions are
properties of one season's schedule, so they live on `SeasonCalendar` and can
be loaded from YAML instead of being baked into the range logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

import yaml

from .settings import AppSettings, ConfigurationError

DATE_FORMAT = "%Y-%m-%d"

RANGE_LENGTHS: Dict[str, int] = {"1d": 1, "1w": 7, "2w": 14, "1m": 30}
ALL_RANGE = "all"
RANGE_CHOICES = tuple(RANGE_LENGTHS) + (ALL_RANGE,)


def parse_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Expected a YYYY-MM-DD date, got: {value!r}") from None


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def _date_range(start: date, end: date) -> Iterable[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


@dataclass(frozen=True)
class SeasonCalendar:
    season_start: date
    no_game_dates: FrozenSet[date] = field(default_factory=frozenset)
    # anchor date -> first day of the week it should report on
    week_shifts: Mapping[date, date] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "SeasonCalendar":
        if not isinstance(raw, Mapping) or "season_start" not in raw:
            raise ConfigurationError("Season calendar must define season_start")
        try:
            season_start = parse_date(raw["season_start"])  # type: ignore[arg-type]
            no_game = frozenset(parse_date(item) for item in raw.get("no_game_dates") or [])
            shifts = {
                parse_date(key): parse_date(value)
                for key, value in (raw.get("week_shifts") or {}).items()  # type: ignore[union-attr]
            }
        except (ValueError, AttributeError) as exc:
            raise ConfigurationError(f"Invalid season calendar: {exc}") from exc
        return cls(season_start=season_start, no_game_dates=no_game, week_shifts=shifts)

    @classmethod
    def load(cls, path: Path) -> "SeasonCalendar":
        if not path.exists():
            raise ConfigurationError(f"Season calendar not found at {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Season calendar at {path} is not valid YAML: {exc}") from exc
        return cls.from_mapping(raw or {})

    def is_game_day(self, day: date) -> bool:
        return day not in self.no_game_dates

    def date_strs(self, anchor: str | date, date_range: str) -> List[str]:
        """Dates to report for `date_range` ending at `anchor`.

        Fixed-length ranges walk backward from the anchor (newest first); `all`
        runs from the season start through the anchor, oldest first.
        """

        anchor_date = parse_date(anchor)
        if date_range == "1d":
            return [format_date(anchor_date)]

        if date_range == ALL_RANGE:
            return [
                format_date(day)
                for day in _date_range(self.season_start, anchor_date)
                if self.is_game_day(day)
            ]

        if date_range not in RANGE_LENGTHS:
            raise ValueError(f"Unsupported date range {date_range!r}; use one of {', '.join(RANGE_CHOICES)}")

        wanted = RANGE_LENGTHS[date_range]
        result: List[str] = []
        day = anchor_date
        while len(result) < wanted:
            if self.is_game_day(day):
                result.append(format_date(day))
            day -= timedelta(days=1)
        return result

    def weekly_date_strs(self, anchor: str | date) -> List[str]:
        """Monday-to-anchor dates of the fantasy week containing `anchor`."""

        anchor_date = parse_date(anchor)
        if anchor_date < self.season_start:
            return []
        week_start = self.week_shifts.get(anchor_date)
        if week_start is None:
            week_start = anchor_date - timedelta(days=anchor_date.weekday())
        start = max(week_start, self.season_start)
        return [format_date(day) for day in _date_range(start, anchor_date) if self.is_game_day(day)]


def default_calendar() -> SeasonCalendar:
    """The 2019 MLB regular season."""

    no_game = set(_date_range(date(2019, 3, 22), date(2019, 3, 27)))
    no_game.update(_date_range(date(2019, 7, 8), date(2019, 7, 10)))
    return SeasonCalendar(
        season_start=date(2019, 3, 20),
        no_game_dates=frozenset(no_game),
        week_shifts={date(2019, 3, 31): date(2019, 3, 18)},
    )


def load_calendar(settings: AppSettings, path: Optional[Path] = None) -> SeasonCalendar:
    target = path or settings.calendar_path
    if target is None:
        return default_calendar()
    return SeasonCalendar.load(target)
