from pathlib import Path

import pytest

from fantasy_mlb.settings import AppSettings, reset_settings_cache
from fantasy_mlb.stats import BatterStats, PitcherStats, Player


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        sportradar_api_key="test-key",
        data_root=tmp_path / "data",
        log_level="INFO",
        request_delay=0.0,
    )


def make_batter(name: str = "Trey Mancini", primary_position: str = "RF", **stats: int) -> Player:
    return Player(
        name=name,
        position="OF",
        primary_position=primary_position,
        batter_stats=BatterStats(**stats),
    )


def make_pitcher(name: str = "Blake Snell", primary_position: str = "SP", **stats) -> Player:
    return Player(
        name=name,
        position="P",
        primary_position=primary_position,
        pitcher_stats=PitcherStats(**stats),
    )


@pytest.fixture()
def mancini() -> Player:
    return make_batter(
        at_bats=3,
        runs=2,
        hits=3,
        singles=2,
        home_runs=1,
        runs_batted_in=2,
        stolen_bases=0,
        walks=2,
        hit_by_pitch=0,
        total_bases=6,
    )


@pytest.fixture()
def snell() -> Player:
    return make_pitcher(
        innings_pitched=6.0,
        wins=1,
        saves=0,
        outs=18,
        hits=6,
        earned_runs=1,
        home_runs=1,
        walks=0,
        hit_batters=0,
        strikeouts=11,
        stolen_bases_allowed=1,
        batters_grounded_into_double_plays=1,
        total_bases_allowed=10,
    )
