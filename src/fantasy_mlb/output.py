"""Fixed-width ("pretty") and CSV rendering of report rows."""

from __future__ import annotations

import csv
import io
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .report import OutstandingPlayer
from .scoring import BATTER_STATS, PITCHER_STATS
from .stats import FantasyPlayer

PLAYER_WIDTH = 18
TEAM_WIDTH = 10
INNINGS_WIDTH = 7
TEAM_TOTAL_WIDTH = 20
DATE_WIDTH = 11

BATTER_COLUMNS = {code: name for name, code in BATTER_STATS}
PITCHER_COLUMNS = {code: name for name, code in PITCHER_STATS}


def format_innings(innings_pitched: float) -> str:
    return f"{round(innings_pitched * 10) / 10:g}"


def _csv_line(values: Sequence[object]) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="").writerow(values)
    return buffer.getvalue()


def _column_width(code: str) -> int:
    return INNINGS_WIDTH if code == "P.IP" else len(code) + 1


def stat_value(fp: FantasyPlayer, code: str) -> Optional[str]:
    if code in BATTER_COLUMNS:
        stats = fp.player.batter_stats
        return None if stats is None else str(getattr(stats, BATTER_COLUMNS[code]))
    if code in PITCHER_COLUMNS:
        stats = fp.player.pitcher_stats
        if stats is None:
            return None
        if code == "P.IP":
            return format_innings(stats.innings_pitched)
        return str(getattr(stats, PITCHER_COLUMNS[code]))
    return None


def header_string(headers: Sequence[str], is_csv: bool) -> str:
    if is_csv:
        return _csv_line(headers)

    items = []
    for item in headers:
        if item == "Player":
            items.append(f"{'Player':{PLAYER_WIDTH}}")
        elif item == "Team":
            items.append(f"{'Team':{TEAM_WIDTH}}")
        elif item == "P.IP":
            items.append(f"{item}   ")
        else:
            items.append(f"{item} ")
    return "".join(items)


def player_stats_string(fp: FantasyPlayer, headers: Sequence[str], is_csv: bool) -> str:
    if is_csv:
        values = []
        for item in headers:
            if item == "Player":
                values.append(fp.player.name)
            elif item == "Team":
                values.append(fp.team)
            elif item == "FanPts":
                values.append(f"{fp.fantasy_points:.2f}")
            elif item == "Pos":
                values.append(fp.player.primary_position)
            else:
                values.append(stat_value(fp, item) or "")
        return _csv_line(values)

    parts = []
    for item in headers:
        if item == "Player":
            parts.append(f"{fp.player.name[:PLAYER_WIDTH - 1]:{PLAYER_WIDTH}}")
        elif item == "Team":
            parts.append(f"{fp.team[:TEAM_WIDTH - 1]:{TEAM_WIDTH}}")
        elif item == "FanPts":
            parts.append(f"{fp.fantasy_points:6.2f} ")
        elif item == "Pos":
            parts.append(f"{fp.player.primary_position:4}")
        else:
            parts.append(f"{stat_value(fp, item) or '':{_column_width(item)}}")
    return "".join(parts)


def players_lines(players: Iterable[FantasyPlayer], headers: Sequence[str], is_csv: bool) -> List[str]:
    lines = [header_string(headers, is_csv)]
    lines.extend(player_stats_string(fp, headers, is_csv) for fp in players)
    return lines


def team_totals_lines(totals: pd.DataFrame, is_csv: bool) -> List[str]:
    lines = ["# Team Rankings"]
    if is_csv:
        lines.append("Team,FanPts")
        lines.extend(_csv_line([row.team, f"{row.fantasy_points:.2f}"]) for row in totals.itertuples())
    else:
        lines.append(f"{'Team':{TEAM_TOTAL_WIDTH}}{'FanPts':>8}")
        lines.extend(f"{row.team:{TEAM_TOTAL_WIDTH}}{row.fantasy_points:8.1f}" for row in totals.itertuples())
    return lines


def outstanding_lines(hits: Iterable[OutstandingPlayer], headers: Sequence[str], is_csv: bool) -> List[str]:
    if is_csv:
        lines = [_csv_line(["Date", *headers])]
        lines.extend(f"{hit.date},{player_stats_string(hit.player, headers, True)}" for hit in hits)
        return lines
    lines = [f"{'Date':{DATE_WIDTH}}{header_string(headers, False)}"]
    lines.extend(f"{hit.date:{DATE_WIDTH}}{player_stats_string(hit.player, headers, False)}" for hit in hits)
    return lines


def weekly_changes_lines(grid: pd.DataFrame, is_csv: bool) -> List[str]:
    if is_csv:
        return grid.to_csv(float_format="%.2f", index_label="Date").splitlines()

    widths = [max(len(str(team)), 8) + 2 for team in grid.columns]
    header = f"{'Date':{DATE_WIDTH}}" + "".join(f"{str(team):>{w}}" for team, w in zip(grid.columns, widths))
    lines = [header]
    for label, row in grid.iterrows():
        cells = "".join(f"{value:>{w}.1f}" for value, w in zip(row.tolist(), widths))
        lines.append(f"{str(label):{DATE_WIDTH}}{cells}")
    return lines
