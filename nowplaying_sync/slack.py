from __future__ import annotations

import requests
from typing import Any, Dict

from . import log
from .config import Config

PROFILE_SET = "users.profile.set"


class SlackError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def slack_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/json",
        # content-type is set by requests for json=...
    }


def build_profile_body(text: str, emoji: str) -> Dict[str, Any]:
    return {
        "profile": {
            "status_text": text,
            "status_emoji": emoji,
            # never expire, the loop clears it explicitly
            "status_expiration": 0,
        }
    }


def set_status(base: str, token: str, text: str, emoji: str, *, timeout: int = 30) -> None:
    url = f"{base.rstrip('/')}/{PROFILE_SET}"
    r = requests.post(url, headers=slack_headers(token), json=build_profile_body(text, emoji), timeout=timeout)
    if not (200 <= r.status_code < 300):
        body = ""
        try:
            body = r.text or ""
        except Exception:
            body = ""
        raise SlackError(f"Slack {PROFILE_SET} failed: HTTP {r.status_code}", status_code=r.status_code, body=body[:2000])
    try:
        data = r.json()
    except ValueError as e:
        raise SlackError(f"Slack {PROFILE_SET} invalid json: {e}", status_code=r.status_code, body=(r.text or "")[:2000])
    if not isinstance(data, dict) or not data.get("ok"):
        err = data.get("error") if isinstance(data, dict) else None
        raise SlackError(f"Slack API error: {err or 'unknown_error'}", status_code=r.status_code)


class SlackSink:
    def __init__(self, cfg: Config):
        self.cfg = cfg

    def write(self, text: str, emoji: str) -> bool:
        try:
            set_status(self.cfg.SLACK_BASE, self.cfg.SLACK_USER_TOKEN, text, emoji, timeout=self.cfg.HTTP_TIMEOUT)
        except SlackError as e:
            log.error(str(e))
            return False
        except requests.RequestException as e:
            log.error(f"Error updating Slack status: {e}")
            return False
        return True
