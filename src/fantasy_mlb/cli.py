from __future__ import annotations

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, List, Optional

import click
import yaml

from .aggregate import create_fantasy_players
from .cache import Fetcher, PlayerSource, StatsCache
from .league import InvalidLeagueNameError, LeagueExistsError, LeagueStore, SAMPLE_LEAGUE, validate_league_name
from .output import (
    outstanding_lines,
    players_lines,
    team_totals_lines,
    weekly_changes_lines,
)
from .report import (
    DEFAULT_BATTER_THRESHOLD,
    DEFAULT_PITCHER_THRESHOLD,
    outstanding_players,
    team_totals,
    top_n_split,
    weekly_changes,
)
from .roster import Roster, build_roster
from .scoring import BATTER_STAT_NAMES, PITCHER_STAT_NAMES, ScoringRule
from .season import RANGE_CHOICES, SeasonCalendar, format_date, load_calendar, parse_date
from .settings import AppSettings, ConfigurationError, get_settings
from .sportradar import SportradarClient

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FORMAT_CHOICES = ("pretty", "csv")


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _settings(ctx: click.Context) -> AppSettings:
    return ctx.obj["settings"]


def _default_date() -> str:
    return format_date(date.today() - timedelta(days=1))


def _validate_date(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> str:
    if value is None:
        return _default_date()
    try:
        return format_date(parse_date(value))
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from None


def _load_league(settings: AppSettings, league: str) -> tuple[ScoringRule, Roster]:
    store = LeagueStore(settings)
    try:
        return store.load_scoring(league), store.load_roster(league)
    except ConfigurationError as exc:
        raise click.ClickException(f"Failed to load league '{league}': {exc}") from exc


def _load_calendar(settings: AppSettings) -> SeasonCalendar:
    try:
        return load_calendar(settings)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc


def _player_source(ctx: click.Context, api_key: Optional[str]) -> PlayerSource:
    settings = _settings(ctx)

    def factory() -> Fetcher:
        client = SportradarClient(settings, api_key=api_key)
        ctx.call_on_close(client.close)
        return client.get_players

    return PlayerSource(cache=StatsCache(settings), fetcher_factory=factory)


def _run(action: Callable[[], List[str]], context: str) -> None:
    try:
        lines = action()
    except ConfigurationError as exc:
        raise click.ClickException(f"{context}: {exc}") from exc
    for line in lines:
        click.echo(line)


def date_option(func: Callable) -> Callable:
    return click.option(
        "--date",
        "-d",
        "day",
        metavar="YYYY-MM-DD",
        callback=_validate_date,
        help="Anchor date for stats (defaults to yesterday).",
    )(func)


def league_option(func: Callable) -> Callable:
    return click.option(
        "--league",
        "-l",
        default=SAMPLE_LEAGUE,
        show_default=True,
        help="League name for scoring rule and roster.",
    )(func)


def api_key_option(func: Callable) -> Callable:
    return click.option(
        "--api-key",
        "-k",
        default=None,
        help="Sportradar API key; overrides SPORTRADAR_API_KEY.",
    )(func)


def format_option(func: Callable) -> Callable:
    return click.option(
        "--format",
        "-f",
        "output_format",
        type=click.Choice(FORMAT_CHOICES),
        default="pretty",
        show_default=True,
        help="Output format.",
    )(func)


@click.group()
@click.option(
    "--env-file",
    type=click.Path(path_type=Path, dir_okay=False, exists=False, readable=True),
    default=".env",
    show_default=True,
    help="Path to the .env file to load.",
)
@click.option("--log-level", default=None, help="Override LOG_LEVEL from the environment.")
@click.pass_context
def cli(ctx: click.Context, env_file: Path, log_level: Optional[str]) -> None:
    """Fantasy baseball head-to-head points by your league's scoring settings."""

    settings = get_settings(env_file)
    _configure_logging(log_level or settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--show-secrets", is_flag=True, help="Display the raw API key. Use with caution.")
@click.pass_context
def env(ctx: click.Context, show_secrets: bool) -> None:
    """Show the current environment configuration."""

    settings = _settings(ctx)
    api_key = settings.sportradar_api_key if show_secrets else settings.masked_api_key()
    rows = [
        ("SPORTRADAR_API_KEY", api_key or ""),
        ("DATA_ROOT", str(settings.data_root)),
        ("LOG_LEVEL", settings.log_level),
        ("SPORTRADAR_REQUEST_DELAY", str(settings.request_delay)),
        ("SEASON_CALENDAR", str(settings.calendar_path or "")),
    ]
    width = max(len(key) for key, _ in rows)
    for key, value in rows:
        click.echo(f"{key.ljust(width)} : {value}")


@cli.command()
@date_option
@click.option(
    "--range",
    "-r",
    "date_range",
    type=click.Choice(RANGE_CHOICES),
    default="1d",
    show_default=True,
    help="Date range ending at --date.",
)
@league_option
@api_key_option
@format_option
@click.option("--all", "show_all", is_flag=True, help="Include players not on any roster as <FA>.")
@click.option("--top", type=click.IntRange(min=1), default=None, help="Show only the top N batters and pitchers.")
@click.option("--teams", "by_team", is_flag=True, help="Show point totals per fantasy team.")
@click.pass_context
def show(
    ctx: click.Context,
    day: str,
    date_range: str,
    league: str,
    api_key: Optional[str],
    output_format: str,
    show_all: bool,
    top: Optional[int],
    by_team: bool,
) -> None:
    """Show fantasy points for the players in a league."""

    settings = _settings(ctx)
    rule, roster = _load_league(settings, league)
    calendar = _load_calendar(settings)
    if by_team and top is not None:
        raise click.UsageError("--teams and --top cannot be combined")
    is_csv = output_format == "csv"

    def render() -> List[str]:
        days = calendar.date_strs(day, date_range)
        raw_players = _player_source(ctx, api_key).players(days)
        players = create_fantasy_players(raw_players, rule, roster, show_all)

        if by_team:
            return team_totals_lines(team_totals(players), is_csv)
        if top is not None:
            batters, pitchers = top_n_split(players, top)
            lines = [f"# Top {top} Batters"]
            lines.extend(players_lines(batters, rule.header_items_for_batter(), is_csv))
            lines.append("")
            lines.append(f"# Top {top} Pitchers")
            lines.extend(players_lines(pitchers, rule.header_items_for_pitcher(), is_csv))
            return lines
        return players_lines(players, rule.header_items(), is_csv)

    _run(render, f"league {league}, {date_range} ending {day}")


@cli.command()
@date_option
@league_option
@api_key_option
@format_option
@click.option(
    "--batter-threshold",
    type=float,
    default=DEFAULT_BATTER_THRESHOLD,
    show_default=True,
    help="Minimum single-date points for a batter.",
)
@click.option(
    "--pitcher-threshold",
    type=float,
    default=DEFAULT_PITCHER_THRESHOLD,
    show_default=True,
    help="Minimum single-date points for a pitcher.",
)
@click.option("--all", "show_all", is_flag=True, help="Include players not on any roster as <FA>.")
@click.pass_context
def outstanding(
    ctx: click.Context,
    day: str,
    league: str,
    api_key: Optional[str],
    output_format: str,
    batter_threshold: float,
    pitcher_threshold: float,
    show_all: bool,
) -> None:
    """List single-date performances above the thresholds, season to date."""

    settings = _settings(ctx)
    rule, roster = _load_league(settings, league)
    calendar = _load_calendar(settings)

    def render() -> List[str]:
        days = calendar.date_strs(day, "all")
        players_by_date = _player_source(ctx, api_key).players_by_date(days)
        hits = outstanding_players(
            players_by_date,
            rule,
            roster,
            batter_threshold=batter_threshold,
            pitcher_threshold=pitcher_threshold,
            show_all=show_all,
        )
        return outstanding_lines(hits, rule.header_items(), output_format == "csv")

    _run(render, f"league {league}, season through {day}")


@cli.command()
@date_option
@league_option
@api_key_option
@format_option
@click.pass_context
def weekly(ctx: click.Context, day: str, league: str, api_key: Optional[str], output_format: str) -> None:
    """Show per-date team totals for the fantasy week containing --date."""

    settings = _settings(ctx)
    rule, roster = _load_league(settings, league)
    calendar = _load_calendar(settings)

    def render() -> List[str]:
        days = calendar.weekly_date_strs(day)
        if not days:
            return [f"No game dates in the week of {day}"]
        players_by_date = _player_source(ctx, api_key).players_by_date(days)
        return weekly_changes_lines(weekly_changes(players_by_date, rule, roster), output_format == "csv")

    _run(render, f"league {league}, week of {day}")


@cli.group()
def league() -> None:
    """League scoring rule and roster management."""


def _prompt_scoring_rule() -> ScoringRule:
    batter = {
        name: click.prompt(f"Enter score for batter.{name} (enter for 0)", type=float, default=0.0, show_default=False)
        for name in BATTER_STAT_NAMES
    }
    pitcher = {
        name: click.prompt(f"Enter score for pitcher.{name} (enter for 0)", type=float, default=0.0, show_default=False)
        for name in PITCHER_STAT_NAMES
    }
    return ScoringRule(batter=batter, pitcher=pitcher)


def _prompt_roster() -> Roster:
    num_batters = click.prompt("How many batters are in a team roster?", type=click.IntRange(1, 15))
    num_pitchers = click.prompt("How many pitchers are in a team roster?", type=click.IntRange(1, 15))
    num_teams = click.prompt("How many teams are in your fantasy league?", type=click.IntRange(2, 12))

    team_names = [click.prompt(f"Enter the name of team {i}").strip() for i in range(1, num_teams + 1)]
    teams = []
    for team in team_names:
        batters = [
            click.prompt(f"Enter the name of Batter {i} for team {team} (ex: John Doe)").strip()
            for i in range(1, num_batters + 1)
        ]
        pitchers = [
            click.prompt(f"Enter the name of Pitcher {i} for team {team} (ex: John Doe)").strip()
            for i in range(1, num_pitchers + 1)
        ]
        teams.append((team, batters, pitchers))
    return build_roster(teams)


@league.command("new")
@click.option("--name", "-n", required=True, help="Name of the new league.")
@click.option("--force", "-f", is_flag=True, help="Remove existing league settings if they exist.")
@click.pass_context
def league_new(ctx: click.Context, name: str, force: bool) -> None:
    """Create a league by entering its scoring rule and roster."""

    store = LeagueStore(_settings(ctx))
    try:
        league_name = validate_league_name(name)
    except InvalidLeagueNameError as exc:
        raise click.BadParameter(str(exc), param_hint="--name") from exc
    if store.exists(league_name) and not force:
        raise click.ClickException(f"league with name {league_name} already exists, use other name")

    rule = _prompt_scoring_rule()
    roster = _prompt_roster()
    try:
        league_dir = store.create(league_name, rule, roster, force=force)
    except LeagueExistsError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Saved league {league_name} → {league_dir}")
    click.echo(f"  scoring columns: {', '.join(rule.header_items()[4:]) or '(none)'}")
    click.echo(f"  teams: {', '.join(roster.teams)}")


@league.command("show")
@click.option("--name", "-n", default=SAMPLE_LEAGUE, show_default=True, help="League to display.")
@click.pass_context
def league_show(ctx: click.Context, name: str) -> None:
    """Print a league's non-zero scoring weights and its roster."""

    rule, roster = _load_league(_settings(ctx), name)
    click.echo(f"# Scoring rule ({name})")
    for role, weights in rule.to_mapping().items():
        for stat, weight in weights.items():
            if weight != 0.0:
                click.echo(f"  {role}.{stat}: {weight:g}")
    click.echo(f"# Roster ({len(roster)} players)")
    for team in roster.teams:
        click.echo(f"  {team}")
        for player in roster:
            if player.team == team:
                click.echo(f"    {player.role.value:8} {player.name}")


@league.command("import-roster")
@click.option("--name", "-n", required=True, help="Existing league to receive the roster.")
@click.option(
    "--file",
    "roster_file",
    type=click.Path(path_type=Path, dir_okay=False, exists=True, readable=True),
    required=True,
    help="JSON or YAML document of the form {players: [{name, role, team}]}.",
)
@click.pass_context
def league_import_roster(ctx: click.Context, name: str, roster_file: Path) -> None:
    """Replace a league's roster with one exported from a league site."""

    store = LeagueStore(_settings(ctx))
    try:
        name = validate_league_name(name)
    except InvalidLeagueNameError as exc:
        raise click.BadParameter(str(exc), param_hint="--name") from exc
    if not store.exists(name):
        raise click.ClickException(f"League '{name}' does not exist; create it with `league new` first")
    try:
        raw = yaml.safe_load(roster_file.read_text(encoding="utf-8"))
        roster = Roster.from_mapping(raw)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Roster file {roster_file} is not valid JSON/YAML: {exc}") from exc
    except ConfigurationError as exc:
        raise click.ClickException(f"Roster file {roster_file}: {exc}") from exc
    path = store.save_roster(name, roster)
    click.echo(f"Saved roster ({len(roster)} players, {len(roster.teams)} teams) → {path}")


__all__ = ["cli"]
