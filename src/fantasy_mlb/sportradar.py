from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import httpx

from .season import parse_date
from .settings import AppSettings, ConfigurationError
from .stats import BatterStats, PitcherStats, Player

LOGGER = logging.getLogger(__name__)

BASE_URL = "https://api.sportradar.us/mlb-t6"
ACTIVE_STATUS = "A"


def _dig(data: Mapping[str, Any], path: str) -> int:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return 0
        current = current.get(part)
    return int(current or 0)


def convert_hitting(overall: Mapping[str, Any]) -> BatterStats:
    return BatterStats(
        at_bats=_dig(overall, "ab"),
        runs=_dig(overall, "runs.total"),
        hits=_dig(overall, "onbase.h"),
        singles=_dig(overall, "onbase.s"),
        doubles=_dig(overall, "onbase.d"),
        triples=_dig(overall, "onbase.t"),
        home_runs=_dig(overall, "onbase.hr"),
        runs_batted_in=_dig(overall, "rbi"),
        sacrifice_hits=_dig(overall, "outs.sachit"),
        stolen_bases=_dig(overall, "steal.stolen"),
        caught_stealing=_dig(overall, "steal.caught"),
        walks=_dig(overall, "onbase.bb"),
        intentional_walks=_dig(overall, "onbase.ibb"),
        hit_by_pitch=_dig(overall, "onbase.hbp"),
        strikeouts=_dig(overall, "outs.ktotal"),
        ground_into_double_play=_dig(overall, "outs.gidp"),
        total_bases=_dig(overall, "onbase.tb"),
    )


def convert_pitching(overall: Mapping[str, Any]) -> PitcherStats:
    return PitcherStats(
        innings_pitched=float(overall.get("ip_2") or 0.0),
        wins=_dig(overall, "games.win"),
        losses=_dig(overall, "games.loss"),
        complete_games=_dig(overall, "games.complete"),
        shutouts=_dig(overall, "games.shutout"),
        saves=_dig(overall, "games.save"),
        outs=_dig(overall, "ip_1"),
        hits=_dig(overall, "onbase.h"),
        earned_runs=_dig(overall, "runs.earned"),
        home_runs=_dig(overall, "onbase.hr"),
        walks=_dig(overall, "onbase.bb"),
        intentional_walks=_dig(overall, "onbase.ibb"),
        hit_batters=_dig(overall, "onbase.hbp"),
        strikeouts=_dig(overall, "outs.ktotal"),
        stolen_bases_allowed=_dig(overall, "steal.stolen"),
        batters_grounded_into_double_plays=_dig(overall, "outs.gidp"),
        total_bases_allowed=_dig(overall, "onbase.tb"),
    )


def convert_players(raw_players: Iterable[Mapping[str, Any]]) -> List[Player]:
    players: List[Player] = []
    for raw in raw_players:
        position = str(raw.get("position") or "")
        statistics = raw.get("statistics") or {}
        hitting = (statistics.get("hitting") or {}).get("overall")
        pitching = (statistics.get("pitching") or {}).get("overall")
        players.append(
            Player(
                name=f"{raw.get('preferred_name', '')} {raw.get('last_name', '')}".strip(),
                position=position,
                primary_position=str(raw.get("primary_position") or ""),
                batter_stats=convert_hitting(hitting) if hitting is not None and position != "P" else None,
                pitcher_stats=convert_pitching(pitching) if pitching is not None else None,
            )
        )
    return players


def players_from_summary(summary: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    game = summary["game"]
    return list(game["home"].get("players") or []) + list(game["away"].get("players") or [])


class SportradarClient:
    """Box-score reader for the Sportradar MLB API, one request per `delay` seconds."""

    def __init__(
        self,
        settings: AppSettings,
        api_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        key = api_key or settings.sportradar_api_key
        if not key:
            raise ConfigurationError("both --api-key option and SPORTRADAR_API_KEY env are not set")
        self.api_key = key
        self.delay = settings.request_delay
        self._sleep = sleep
        self._client = client or httpx.Client(
            base_url=BASE_URL,
            timeout=httpx.Timeout(20.0),
            headers={"Accept": "application/json"},
        )

    def schedule_path(self, day: str) -> str:
        return f"/games/{parse_date(day).strftime('%Y/%m/%d')}/schedule.json"

    @staticmethod
    def summary_path(game_id: str) -> str:
        return f"/games/{game_id}/summary.json"

    def _get_json(self, path: str) -> Dict[str, Any]:
        self._sleep(self.delay)
        LOGGER.debug("Fetching Sportradar %s", path)
        response = self._client.get(path, params={"api_key": self.api_key})
        response.raise_for_status()
        return response.json()

    def get_game_ids(self, day: str) -> List[str]:
        schedule = self._get_json(self.schedule_path(day))
        return [str(game["id"]) for game in schedule.get("games") or []]

    def get_raw_players(self, day: str) -> List[Mapping[str, Any]]:
        game_ids = self.get_game_ids(day)
        result: List[Mapping[str, Any]] = []
        for index, game_id in enumerate(game_ids, start=1):
            try:
                players = players_from_summary(self._get_json(self.summary_path(game_id)))
            except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
                LOGGER.warning("Fetch failed for game %s on %s: %s", game_id, day, exc)
                continue
            result.extend(p for p in players if p.get("status") == ACTIVE_STATUS)
            LOGGER.info("game summary fetched: %d/%d", index, len(game_ids))
        return result

    def get_players(self, day: str) -> List[Player]:
        return convert_players(self.get_raw_players(day))

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "SportradarClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
