"""
Runtime configuration, read from the environment.

OPENAI_API_KEY enables the scouting model; without it every scouting call
fails with ScoutingUnavailableError and the board still works manually.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://0.0.0.0:5173",
    "http://[::1]:5173",
)


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    log_level: str = "INFO"

    @property
    def scouting_enabled(self) -> bool:
        return bool(self.openai_api_key)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def get_settings() -> Settings:
    """Read settings from the environment. Not cached so tests can monkeypatch env vars."""
    origins_raw = os.environ.get("TALENT_SCOUT_CORS_ORIGINS", "").strip()
    origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip()) if origins_raw else DEFAULT_CORS_ORIGINS
    return Settings(
        openai_api_key=os.environ.get("OPENAI_API_KEY", "").strip(),
        model=os.environ.get("TALENT_SCOUT_MODEL", "").strip() or DEFAULT_MODEL,
        max_tokens=_env_int("TALENT_SCOUT_MAX_TOKENS", DEFAULT_MAX_TOKENS),
        timeout_seconds=_env_float("TALENT_SCOUT_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        cors_origins=origins,
        log_level=os.environ.get("TALENT_SCOUT_LOG_LEVEL", "").strip().upper() or "INFO",
    )
