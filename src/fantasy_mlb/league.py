from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .roster import Roster, sample_roster
from .scoring import ScoringRule, sample_scoring_rule
from .settings import AppSettings

LOGGER = logging.getLogger(__name__)

SAMPLE_LEAGUE = "sample"
SCORING_FILENAME = "scoring.yaml"
ROSTER_FILENAME = "roster.yaml"


class InvalidLeagueNameError(ValueError):
    """Raised when a league name cannot be used as a directory name."""


class LeagueExistsError(FileExistsError):
    """Raised when creating a league whose directory already exists."""


def validate_league_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidLeagueNameError("league name must not be empty")
    if cleaned.startswith("_"):
        raise InvalidLeagueNameError("league name should not start with _")
    if cleaned == SAMPLE_LEAGUE:
        raise InvalidLeagueNameError(f"'{SAMPLE_LEAGUE}' is reserved for the built-in league")
    if any(sep in cleaned for sep in ("/", "\\")) or cleaned in {".", ".."}:
        raise InvalidLeagueNameError(f"league name {name!r} must be a plain directory name")
    return cleaned


@dataclass
class LeagueStore:
    settings: AppSettings

    def league_dir(self, name: str) -> Path:
        return self.settings.leagues_dir / name

    def scoring_path(self, name: str) -> Path:
        return self.league_dir(name) / SCORING_FILENAME

    def roster_path(self, name: str) -> Path:
        return self.league_dir(name) / ROSTER_FILENAME

    def exists(self, name: str) -> bool:
        return name == SAMPLE_LEAGUE or self.league_dir(name).is_dir()

    def load_scoring(self, name: str) -> ScoringRule:
        if name == SAMPLE_LEAGUE:
            return sample_scoring_rule()
        path = self.scoring_path(name)
        LOGGER.info("Loading the scoring rule for league %s from %s", name, path)
        return ScoringRule.load(path)

    def load_roster(self, name: str) -> Roster:
        if name == SAMPLE_LEAGUE:
            return sample_roster()
        path = self.roster_path(name)
        LOGGER.info("Loading the roster for league %s from %s", name, path)
        return Roster.load(path)

    def create(
        self,
        name: str,
        rule: ScoringRule,
        roster: Optional[Roster] = None,
        force: bool = False,
    ) -> Path:
        league_name = validate_league_name(name)
        league_dir = self.league_dir(league_name)
        if league_dir.exists():
            if not force:
                raise LeagueExistsError(f"league with name {league_name} already exists, use other name")
            LOGGER.info("Removing existing league settings at %s", league_dir)
            shutil.rmtree(league_dir)
        league_dir.mkdir(parents=True, exist_ok=True)

        rule.save(self.scoring_path(league_name))
        LOGGER.info("Saved scoring rule to %s", self.scoring_path(league_name))
        if roster is not None:
            self.save_roster(league_name, roster)
        return league_dir

    def save_roster(self, name: str, roster: Roster) -> Path:
        path = roster.save(self.roster_path(validate_league_name(name)))
        LOGGER.info("Saved roster to %s", path)
        return path
