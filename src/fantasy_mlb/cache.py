from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import httpx

from .settings import AppSettings
from .stats import Player

LOGGER = logging.getLogger(__name__)

Fetcher = Callable[[str], List[Player]]


class StatsFileExistsError(FileExistsError):
    """Raised when a stats cache file for the date is already on disk."""


@dataclass
class StatsCache:
    settings: AppSettings

    def path(self, day: str) -> Path:
        return self.settings.stats_dir / f"{day}.json"

    def exists(self, day: str) -> bool:
        return self.path(day).exists()

    def load(self, day: str) -> List[Player]:
        path = self.path(day)
        LOGGER.info("Loading players from file %s", path)
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError(f"Stats file {path} must contain a JSON array")
        return [Player.from_dict(item) for item in raw]

    def save(self, day: str, players: Iterable[Player]) -> Path:
        path = self.path(day)
        if path.exists():
            raise StatsFileExistsError(f"stats file {path} already exists")
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [player.to_dict() for player in players]
        # "x" mode refuses to clobber a file created since the check above
        with path.open("x", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False)
        LOGGER.info("Saved player stats to %s", path)
        return path


@dataclass
class PlayerSource:
    """Per-date players from the local cache, falling back to a remote fetch.

    A date that cannot be loaded or fetched contributes no players; the
    failure is logged and the remaining dates are still processed.
    """

    cache: StatsCache
    fetcher_factory: Optional[Callable[[], Fetcher]] = None
    _fetcher: Optional[Fetcher] = field(default=None, init=False, repr=False)

    def _get_fetcher(self) -> Optional[Fetcher]:
        if self._fetcher is None and self.fetcher_factory is not None:
            self._fetcher = self.fetcher_factory()
        return self._fetcher

    def players_for(self, day: str) -> List[Player]:
        if self.cache.exists(day):
            try:
                return self.cache.load(day)
            except (OSError, ValueError, TypeError, AttributeError) as exc:
                LOGGER.warning("Failed to read cached stats for %s: %s; treating as no players", day, exc)
                return []

        fetcher = self._get_fetcher()
        if fetcher is None:
            LOGGER.warning("No cached stats for %s and no stats provider configured", day)
            return []

        try:
            players = fetcher(day)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            LOGGER.warning("Failed to fetch stats for %s: %s; treating as no players", day, exc)
            return []

        if not players:
            LOGGER.info("No players found for %s; nothing cached", day)
            return players

        try:
            self.cache.save(day, players)
        except StatsFileExistsError as exc:
            LOGGER.error("Could not cache stats for %s: %s", day, exc)
        return players

    def players_by_date(self, days: Iterable[str]) -> Dict[str, List[Player]]:
        return {day: self.players_for(day) for day in days}

    def players(self, days: Iterable[str]) -> List[Player]:
        result: List[Player] = []
        for players in self.players_by_date(days).values():
            result.extend(players)
        return result
