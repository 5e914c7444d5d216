from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .roster import Roster
from .scoring import ScoringRule, fantasy_points
from .stats import FREE_AGENT_TEAM, FantasyPlayer, Player

LOGGER = logging.getLogger(__name__)


def assign_team(player: Player, roster: Roster, show_all: bool) -> Optional[str]:
    """Fantasy team owning `player`, FREE_AGENT_TEAM under show_all, else None."""

    entry = roster.find(player.name, player.role)
    if entry is not None:
        return entry.team
    return FREE_AGENT_TEAM if show_all else None


def score_players(
    raw_players: Iterable[Player],
    rule: ScoringRule,
    roster: Roster,
    show_all: bool = False,
) -> List[FantasyPlayer]:
    """Match and score players one record at a time, without merging."""

    scored: List[FantasyPlayer] = []
    for player in raw_players:
        team = assign_team(player, roster, show_all)
        if team is None:
            continue
        scored.append(FantasyPlayer(team=team, player=player, fantasy_points=fantasy_points(player, rule)))
    return scored


def merge_fantasy_players(players: Iterable[FantasyPlayer]) -> List[FantasyPlayer]:
    """Fold records sharing (name, primary_position) into one, in first-seen order."""

    merged: Dict[Tuple[str, str], FantasyPlayer] = {}
    for item in players:
        key = item.player.merge_key
        current = merged.get(key)
        if current is None:
            merged[key] = FantasyPlayer(team=item.team, player=item.player, fantasy_points=item.fantasy_points)
            continue
        merged[key] = FantasyPlayer(
            team=current.team,
            player=current.player.merged_with(item.player),
            fantasy_points=current.fantasy_points + item.fantasy_points,
        )
    return list(merged.values())


def rank(players: Iterable[FantasyPlayer]) -> List[FantasyPlayer]:
    # sorted() is stable; equal scores keep their encounter order
    return sorted(players, key=lambda fp: fp.fantasy_points, reverse=True)


def create_fantasy_players(
    raw_players: Iterable[Player],
    rule: ScoringRule,
    roster: Roster,
    show_all: bool = False,
) -> List[FantasyPlayer]:
    scored = score_players(raw_players, rule, roster, show_all)
    merged = merge_fantasy_players(scored)
    LOGGER.debug("Scored %d records into %d fantasy players", len(scored), len(merged))
    return rank(merged)
