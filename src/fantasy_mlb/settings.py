from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_REQUEST_DELAY = 1.05


@dataclass
class AppSettings:
    """Application configuration sourced from environment variables."""

    sportradar_api_key: Optional[str]
    data_root: Path
    log_level: str
    request_delay: float = DEFAULT_REQUEST_DELAY
    calendar_path: Optional[Path] = None

    @property
    def stats_dir(self) -> Path:
        return self.data_root / "stats"

    @property
    def leagues_dir(self) -> Path:
        return self.data_root / "leagues"

    def masked_api_key(self) -> Optional[str]:
        value = self.sportradar_api_key
        if not value:
            return None
        return f"{value[:4]}***{value[-4:]}" if len(value) > 8 else "***"


def _coerce_float(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Expected float-compatible value, got: {value!r}") from None


@lru_cache(maxsize=1)
def get_settings(env_path: Optional[Path | str] = None) -> AppSettings:
    """Load settings from `.env` (if present) and environment variables."""

    env_file = Path(env_path) if env_path else Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    data_root = Path(os.getenv("DATA_ROOT", "./data")).resolve()
    calendar = os.getenv("SEASON_CALENDAR")

    return AppSettings(
        sportradar_api_key=os.getenv("SPORTRADAR_API_KEY") or None,
        data_root=data_root,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        request_delay=_coerce_float(os.getenv("SPORTRADAR_REQUEST_DELAY"), DEFAULT_REQUEST_DELAY),
        calendar_path=Path(calendar) if calendar else None,
    )


def reset_settings_cache() -> None:
    """Clear cached settings; useful for tests."""

    get_settings.cache_clear()  # type: ignore[attr-defined]


class ConfigurationError(RuntimeError):
    """Raised when league, scoring or provider configuration is missing or invalid."""
