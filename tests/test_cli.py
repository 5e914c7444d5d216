import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from fantasy_mlb.cache import StatsCache
from fantasy_mlb.cli import cli
from fantasy_mlb.league import LeagueStore
from fantasy_mlb.scoring import sample_scoring_rule
from fantasy_mlb.settings import AppSettings
from fantasy_mlb.stats import Role

from conftest import make_batter


@pytest.fixture()
def data_root(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture()
def runner_env(data_root: Path) -> dict:
    return {"DATA_ROOT": str(data_root), "SPORTRADAR_API_KEY": None, "SEASON_CALENDAR": None}


def _cache(data_root: Path, day: str, players) -> None:
    settings = AppSettings(sportradar_api_key=None, data_root=data_root, log_level="INFO")
    StatsCache(settings).save(day, players)


def _invoke(runner_env: dict, *args: str, input: str | None = None):
    runner = CliRunner()
    return runner.invoke(cli, ["--log-level", "WARNING", *args], env=runner_env, input=input)


def test_show_csv_for_sample_league(data_root, runner_env, mancini, snell):
    stranger = make_batter(name="Mike Trout", primary_position="CF", home_runs=3)
    _cache(data_root, "2019-06-01", [mancini, snell, stranger])

    result = _invoke(runner_env, "show", "--date", "2019-06-01", "--format", "csv")
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "Player,Team,FanPts,Pos,B.R,B.H,B.HR,B.RBI,B.SB,P.IP,P.W,P.SV,P.ER,P.K" in lines
    assert "Blake Snell,LA Bulls,32.50,SP,,,,,,6,1,0,1,11" in lines
    assert "Trey Mancini,NY Hotdogs,13.50,RF,2,3,1,2,0,,,,," in lines
    assert not any(line.startswith("Mike Trout") for line in lines)


def test_show_all_includes_free_agents(data_root, runner_env, mancini):
    stranger = make_batter(name="Mike Trout", primary_position="CF", home_runs=3)
    _cache(data_root, "2019-06-01", [mancini, stranger])

    result = _invoke(runner_env, "show", "--date", "2019-06-01", "--format", "csv", "--all")
    assert result.exit_code == 0, result.output
    assert "Mike Trout,<FA>,12.00,CF,0,0,3,0,0,,,,," in result.output.splitlines()


def test_show_merges_week_of_cached_dates(data_root, runner_env, mancini):
    for day in ("2019-06-01", "2019-05-31", "2019-05-30", "2019-05-29", "2019-05-28", "2019-05-27", "2019-05-26"):
        _cache(data_root, day, [mancini])

    result = _invoke(runner_env, "show", "--date", "2019-06-01", "--range", "1w", "--teams", "--format", "csv")
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[lines.index("Team,FanPts") + 1] == "NY Hotdogs,94.50"


def test_show_top_split(data_root, runner_env, mancini, snell):
    _cache(data_root, "2019-06-01", [mancini, snell])

    result = _invoke(runner_env, "show", "--date", "2019-06-01", "--top", "1", "--format", "csv")
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[lines.index("# Top 1 Batters") + 1] == "Player,Team,FanPts,Pos,B.R,B.H,B.HR,B.RBI,B.SB"
    assert lines[lines.index("# Top 1 Pitchers") + 1] == "Player,Team,FanPts,Pos,P.IP,P.W,P.SV,P.ER,P.K"
    assert "Blake Snell,LA Bulls,32.50,SP,6,1,0,1,11" in lines


def test_uncached_date_without_api_key_fails_with_context(runner_env):
    result = _invoke(runner_env, "show", "--date", "2019-06-01")
    assert result.exit_code == 1
    assert "league sample" in result.output
    assert "SPORTRADAR_API_KEY" in result.output


def test_unknown_league_fails(runner_env):
    result = _invoke(runner_env, "show", "--date", "2019-06-01", "--league", "ghost")
    assert result.exit_code == 1
    assert "Failed to load league 'ghost'" in result.output


def test_invalid_date_is_rejected(runner_env):
    result = _invoke(runner_env, "show", "--date", "June 1")
    assert result.exit_code == 2


def test_weekly_grid(data_root, runner_env, mancini, snell):
    _cache(data_root, "2019-06-03", [mancini, snell])
    _cache(data_root, "2019-06-04", [mancini])

    result = _invoke(runner_env, "weekly", "--date", "2019-06-04", "--format", "csv")
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "Date,LA Bulls,Chicago Pizzas,NY Hotdogs,Seattle Coffees" in lines
    assert "2019-06-03,32.50,0.00,13.50,0.00" in lines
    assert "2019-06-04,0.00,0.00,13.50,0.00" in lines
    assert "Total,32.50,0.00,27.00,0.00" in lines


def test_weekly_before_season(runner_env):
    result = _invoke(runner_env, "weekly", "--date", "2019-03-01")
    assert result.exit_code == 0, result.output
    assert "No game dates in the week of 2019-03-01" in result.output


def test_outstanding_scan(data_root, runner_env, mancini, snell):
    _cache(data_root, "2019-03-20", [mancini])
    _cache(data_root, "2019-03-21", [snell, mancini])

    result = _invoke(
        runner_env,
        "outstanding",
        "--date",
        "2019-03-21",
        "--batter-threshold",
        "13",
        "--pitcher-threshold",
        "35",
        "--format",
        "csv",
    )
    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line.startswith("2019-")]
    assert [line.split(",")[:2] for line in lines] == [
        ["2019-03-20", "Trey Mancini"],
        ["2019-03-21", "Trey Mancini"],
    ]


def test_league_new_prompts_and_saves(data_root, runner_env):
    weights = ["", "2", "", "", "", "", "4"] + [""] * 10
    weights += ["1", "5"] + [""] * 15
    roster_answers = ["1", "1", "2", "Alpha", "Beta", "john doe", "jake arrieta", "Ann Bat", "Pat Pitch"]
    result = _invoke(
        runner_env,
        "league",
        "new",
        "--name",
        "friends",
        input="\n".join(weights + roster_answers) + "\n",
    )
    assert result.exit_code == 0, result.output

    store = LeagueStore(AppSettings(sportradar_api_key=None, data_root=data_root, log_level="INFO"))
    rule = store.load_scoring("friends")
    assert rule.header_items() == ["Player", "Team", "FanPts", "Pos", "B.R", "B.HR", "P.IP", "P.W"]
    roster = store.load_roster("friends")
    assert roster.teams == ["Alpha", "Beta"]
    assert roster.find("John Doe", Role.BATTER).team == "Alpha"
    assert roster.find("Pat Pitch", Role.PITCHER).team == "Beta"

    again = _invoke(runner_env, "league", "new", "--name", "friends")
    assert again.exit_code == 1
    assert "already exists" in again.output


def test_league_new_rejects_underscore_name(runner_env):
    result = _invoke(runner_env, "league", "new", "--name", "_hidden")
    assert result.exit_code == 2


def test_league_import_roster_and_show(data_root, runner_env, tmp_path):
    settings = AppSettings(sportradar_api_key=None, data_root=data_root, log_level="INFO")
    LeagueStore(settings).create("office", sample_scoring_rule())
    roster_file = tmp_path / "rosters.json"
    roster_file.write_text(
        json.dumps(
            {
                "players": [
                    {"name": "Mike Trout", "role": "Batter", "team": "Halos"},
                    {"name": "Justin Verlander", "role": "Pitcher", "team": "Stros"},
                ]
            }
        )
    )

    result = _invoke(runner_env, "league", "import-roster", "--name", "office", "--file", str(roster_file))
    assert result.exit_code == 0, result.output
    assert "2 players, 2 teams" in result.output

    shown = _invoke(runner_env, "league", "show", "--name", "office")
    assert shown.exit_code == 0, shown.output
    assert "batter.home_runs: 4" in shown.output
    assert "Justin Verlander" in shown.output


def test_env_masks_api_key(runner_env):
    env = dict(runner_env, SPORTRADAR_API_KEY="abcd1234efgh5678")
    result = CliRunner().invoke(cli, ["env"], env=env)
    assert result.exit_code == 0, result.output
    assert "abcd***5678" in result.output
    assert "abcd1234efgh5678" not in result.output


def test_malformed_scoring_file_is_reported(data_root, runner_env):
    league_dir = data_root / "leagues" / "bad"
    league_dir.mkdir(parents=True)
    (league_dir / "scoring.yaml").write_text("batter: [runs, hits]\n")

    result = _invoke(runner_env, "show", "--date", "2019-06-01", "--league", "bad")
    assert result.exit_code == 1
    assert not isinstance(result.exception, AttributeError)
    assert "Failed to load league 'bad'" in result.output


def test_malformed_calendar_file_is_reported(runner_env, tmp_path):
    calendar_file = tmp_path / "season.yaml"
    calendar_file.write_text("season_start: [oops\n")
    env = dict(runner_env, SEASON_CALENDAR=str(calendar_file))

    result = _invoke(env, "weekly", "--date", "2019-06-04")
    assert result.exit_code == 1
    assert "not valid YAML" in result.output


def test_import_roster_rejects_path_like_name(data_root, runner_env, mancini, tmp_path):
    _cache(data_root, "2019-06-01", [mancini])
    roster_file = tmp_path / "rosters.json"
    roster_file.write_text(json.dumps({"players": [{"name": "Mike Trout", "role": "Batter", "team": "Halos"}]}))

    result = _invoke(runner_env, "league", "import-roster", "--name", "../stats", "--file", str(roster_file))
    assert result.exit_code == 2
    assert "plain directory name" in result.output
    assert not (data_root / "stats" / "roster.yaml").exists()


def test_show_rejects_teams_with_top(runner_env):
    result = _invoke(runner_env, "show", "--date", "2019-06-01", "--teams", "--top", "3")
    assert result.exit_code == 2
    assert "--teams and --top cannot be combined" in result.output
