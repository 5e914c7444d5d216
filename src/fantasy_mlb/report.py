from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple

import pandas as pd

from .aggregate import create_fantasy_players
from .roster import Roster
from .scoring import ScoringRule
from .stats import FantasyPlayer, Player, Role

DEFAULT_BATTER_THRESHOLD = 15.0
DEFAULT_PITCHER_THRESHOLD = 30.0
TOTAL_ROW = "Total"


def top_n_split(players: Iterable[FantasyPlayer], n: int) -> Tuple[List[FantasyPlayer], List[FantasyPlayer]]:
    """First `n` batters and first `n` pitchers of an already ranked list."""

    batters: List[FantasyPlayer] = []
    pitchers: List[FantasyPlayer] = []
    if n <= 0:
        return batters, pitchers
    for fp in players:
        if fp.role is Role.PITCHER:
            if len(pitchers) < n:
                pitchers.append(fp)
        elif len(batters) < n:
            batters.append(fp)
        if len(batters) >= n and len(pitchers) >= n:
            break
    return batters, pitchers


def team_totals(players: Iterable[FantasyPlayer]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [{"team": fp.team, "fantasy_points": fp.fantasy_points} for fp in players],
        columns=["team", "fantasy_points"],
    )
    if frame.empty:
        return frame
    totals = frame.groupby("team", sort=False, as_index=False)["fantasy_points"].sum()
    return totals.sort_values("fantasy_points", ascending=False, kind="mergesort").reset_index(drop=True)


@dataclass(frozen=True)
class OutstandingPlayer:
    date: str
    player: FantasyPlayer


def outstanding_players(
    players_by_date: Mapping[str, Sequence[Player]],
    rule: ScoringRule,
    roster: Roster,
    batter_threshold: float = DEFAULT_BATTER_THRESHOLD,
    pitcher_threshold: float = DEFAULT_PITCHER_THRESHOLD,
    show_all: bool = False,
) -> List[OutstandingPlayer]:
    """Single-date performances at or above the role's threshold, date by date."""

    hits: List[OutstandingPlayer] = []
    for day, raw_players in players_by_date.items():
        for fp in create_fantasy_players(raw_players, rule, roster, show_all):
            threshold = pitcher_threshold if fp.role is Role.PITCHER else batter_threshold
            if fp.fantasy_points >= threshold:
                hits.append(OutstandingPlayer(date=day, player=fp))
    return hits


def weekly_changes(
    players_by_date: Mapping[str, Sequence[Player]],
    rule: ScoringRule,
    roster: Roster,
) -> pd.DataFrame:
    """Per-date team point totals (rows: dates then a total row, columns: teams)."""

    days = list(players_by_date)
    teams = roster.teams
    records = []
    for day, raw_players in players_by_date.items():
        for fp in create_fantasy_players(raw_players, rule, roster):
            records.append({"date": day, "team": fp.team, "fantasy_points": fp.fantasy_points})

    if records:
        grid = pd.DataFrame(records).pivot_table(
            index="date", columns="team", values="fantasy_points", aggfunc="sum", fill_value=0.0
        )
        grid = grid.reindex(index=days, columns=teams, fill_value=0.0).astype(float)
    else:
        grid = pd.DataFrame(0.0, index=days, columns=teams)

    grid.index.name = "date"
    grid.columns.name = None
    if len(grid.columns):
        grid.loc[TOTAL_ROW] = grid.sum(axis=0)
    return grid
