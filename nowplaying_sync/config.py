from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

REQUIRED = ("LASTFM_API_KEY", "LASTFM_USERNAME", "SLACK_USER_TOKEN")
FALSE_VALUES = ("false", "0", "no", "off")


class ConfigError(RuntimeError):
    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


@dataclass(frozen=True)
class Config:
    # credentials
    LASTFM_API_KEY: str = ""
    LASTFM_USERNAME: str = ""
    SLACK_USER_TOKEN: str = ""

    # API bases
    LASTFM_BASE: str = "https://ws.audioscrobbler.com/2.0/"
    SLACK_BASE: str = "https://slack.com/api"

    # polling & status
    POLL_SECONDS: int = 30
    STATUS_EMOJI: str = ":musical_note:"
    CLEAR_WHEN_NOT_PLAYING: bool = True

    HTTP_TIMEOUT: int = 30


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in FALSE_VALUES


def _parse_interval(raw: Optional[str], default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"POLL_INTERVAL must be a positive integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"POLL_INTERVAL must be a positive integer, got {raw!r}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """
    Reads settings from the process environment (after merging a local .env)
    or from an explicit mapping. Does not fail on missing credentials:
    check missing_settings() before starting the loop.
    """
    if env is None:
        load_dotenv(Path.cwd() / ".env", override=False)
        env = os.environ

    values = {name: (env.get(name) or "").strip() for name in REQUIRED}
    return Config(
        LASTFM_API_KEY=values["LASTFM_API_KEY"],
        LASTFM_USERNAME=values["LASTFM_USERNAME"],
        SLACK_USER_TOKEN=values["SLACK_USER_TOKEN"],
        POLL_SECONDS=_parse_interval(env.get("POLL_INTERVAL"), Config.POLL_SECONDS),
        STATUS_EMOJI=(env.get("STATUS_EMOJI") or "").strip() or Config.STATUS_EMOJI,
        CLEAR_WHEN_NOT_PLAYING=_parse_bool(env.get("CLEAR_WHEN_NOT_PLAYING"), True),
    )


def missing_settings(cfg: Config) -> List[str]:
    return [name for name in REQUIRED if not getattr(cfg, name)]


def require_complete(cfg: Config) -> None:
    missing = missing_settings(cfg)
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}", missing=missing)
