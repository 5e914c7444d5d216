import pandas as pd

from fantasy_mlb.output import (
    format_innings,
    header_string,
    outstanding_lines,
    player_stats_string,
    team_totals_lines,
    weekly_changes_lines,
)
from fantasy_mlb.report import OutstandingPlayer
from fantasy_mlb.scoring import fantasy_points, sample_scoring_rule
from fantasy_mlb.stats import FantasyPlayer

from conftest import make_pitcher


def test_header_string_csv_and_pretty():
    headers = ["Player", "Team", "FanPts", "Pos", "B.HR", "P.K"]
    assert header_string(headers, True) == "Player,Team,FanPts,Pos,B.HR,P.K"
    assert header_string(headers, False) == "Player            Team      FanPts Pos B.HR P.K "


def test_player_rows_for_sample_rule(mancini, snell):
    rule = sample_scoring_rule()
    headers = rule.header_items()

    batter = FantasyPlayer(team="Avengers", player=mancini, fantasy_points=fantasy_points(mancini, rule))
    assert player_stats_string(batter, headers, True) == "Trey Mancini,Avengers,13.50,RF,2,3,1,2,0,,,,,"
    assert (
        player_stats_string(batter, headers, False)
        == "Trey Mancini      Avengers   13.50 RF  2   3   1    2     0                             "
    )

    pitcher = FantasyPlayer(team="Avengers", player=snell, fantasy_points=fantasy_points(snell, rule))
    assert player_stats_string(pitcher, headers, True) == "Blake Snell,Avengers,32.50,SP,,,,,,6,1,0,1,11"
    assert (
        player_stats_string(pitcher, headers, False)
        == "Blake Snell       Avengers   32.50 SP                          6      1   0    1    11  "
    )


def test_pretty_row_truncates_long_names():
    player = make_pitcher(name="Christopher Longname-Smith", innings_pitched=2.1)
    fp = FantasyPlayer(team="A Very Long Team Name", player=player, fantasy_points=1.0)
    row = player_stats_string(fp, ["Player", "Team", "P.IP"], False)
    assert row == "Christopher Longn A Very Lo 2.1    "


def test_format_innings():
    assert format_innings(6.0) == "6"
    assert format_innings(6.1) == "6.1"
    assert format_innings(3.1000000000000005) == "3.1"


def test_team_totals_lines():
    totals = pd.DataFrame({"team": ["Alpha", "Beta"], "fantasy_points": [35.5, 30.0]})
    assert team_totals_lines(totals, True) == ["# Team Rankings", "Team,FanPts", "Alpha,35.50", "Beta,30.00"]
    pretty = team_totals_lines(totals, False)
    assert pretty[1] == "Team                  FanPts"
    assert pretty[2] == "Alpha                   35.5"


def test_outstanding_lines_prefix_date(snell):
    fp = FantasyPlayer(team="LA Bulls", player=snell, fantasy_points=32.5)
    lines = outstanding_lines([OutstandingPlayer(date="2019-06-01", player=fp)], ["Player", "Team", "FanPts", "Pos"], True)
    assert lines == ["Date,Player,Team,FanPts,Pos", "2019-06-01,Blake Snell,LA Bulls,32.50,SP"]


def test_weekly_changes_lines():
    grid = pd.DataFrame({"Alpha": [1.0, 2.5], "Beta": [0.0, 4.0]}, index=["2019-06-03", "Total"])
    assert weekly_changes_lines(grid, True) == ["Date,Alpha,Beta", "2019-06-03,1.00,0.00", "Total,2.50,4.00"]
    pretty = weekly_changes_lines(grid, False)
    assert pretty[0] == "Date            Alpha      Beta"
    assert pretty[2] == "Total             2.5       4.0"
