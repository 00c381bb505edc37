from __future__ import annotations

import requests
from typing import Any, Dict, List, Optional

from . import log
from .config import Config
from .models import NowPlaying

RECENT_TRACKS_METHOD = "user.getrecenttracks"
IMAGE_SIZE = "medium"


class LastfmError(RuntimeError):
    def __init__(self, message: str, code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.code = code
        self.body = body


class LastfmDecodeError(LastfmError):
    pass


def _decode(r: requests.Response) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError as e:
        body = ""
        try:
            body = r.text or ""
        except Exception:
            body = ""
        raise LastfmDecodeError(f"Last.fm invalid json (HTTP {r.status_code}): {e}", body=body[:2000])
    if not isinstance(data, dict):
        raise LastfmDecodeError(f"Last.fm unexpected payload type {type(data).__name__}")
    return data


def get_recent_track(
    base: str,
    api_key: str,
    user: str,
    *,
    timeout: int = 30,
) -> Optional[Dict[str, Any]]:
    """
    Most recent scrobble entry for the user, raw as Last.fm returns it,
    or None when the user has no history. Raises LastfmError on any failure.
    """
    params = {
        "method": RECENT_TRACKS_METHOD,
        "user": user,
        "api_key": api_key,
        "format": "json",
        "limit": 1,
    }
    r = requests.get(base, params=params, timeout=timeout)
    data = _decode(r)

    # Last.fm reports API errors in the body, often alongside a 4xx
    if data.get("error"):
        raise LastfmError(f"Last.fm API error {data.get('error')}: {data.get('message')}", code=data.get("error"))
    if not (200 <= r.status_code < 300):
        raise LastfmError(f"Last.fm request failed: HTTP {r.status_code}", code=r.status_code)

    recent = data.get("recenttracks") or {}
    if not isinstance(recent, dict):
        raise LastfmDecodeError("Last.fm recenttracks is not an object")
    tracks = recent.get("track")
    if not tracks:
        return None
    # single object when there is one entry, list otherwise
    if isinstance(tracks, list):
        return tracks[0]
    return tracks


def _text(value: Any) -> Optional[str]:
    # Last.fm nests most strings as {"#text": ...}
    if isinstance(value, dict):
        value = value.get("#text")
    if isinstance(value, str) and value.strip():
        return value
    return None


def _medium_image(images: Any) -> Optional[str]:
    if not isinstance(images, list):
        return None
    for img in images:
        if isinstance(img, dict) and img.get("size") == IMAGE_SIZE:
            return _text(img)
    return None


def is_now_playing(entry: Dict[str, Any]) -> bool:
    attr = entry.get("@attr") or {}
    return isinstance(attr, dict) and attr.get("nowplaying") == "true"


def parse_now_playing(entry: Optional[Dict[str, Any]]) -> Optional[NowPlaying]:
    if not isinstance(entry, dict) or not is_now_playing(entry):
        return None
    return NowPlaying(
        artist=_text(entry.get("artist")) or "",
        track=_text(entry.get("name")) or "",
        album=_text(entry.get("album")),
        image_url=_medium_image(entry.get("image")),
    )


class LastfmSource:
    def __init__(self, cfg: Config):
        self.cfg = cfg

    def fetch_current(self) -> Optional[NowPlaying]:
        try:
            entry = get_recent_track(
                self.cfg.LASTFM_BASE,
                self.cfg.LASTFM_API_KEY,
                self.cfg.LASTFM_USERNAME,
                timeout=self.cfg.HTTP_TIMEOUT,
            )
        except LastfmError as e:
            log.error(str(e))
            return None
        except requests.RequestException as e:
            log.error(f"Error fetching from Last.fm: {e}")
            return None

        now = parse_now_playing(entry)
        if now is None:
            log.debug("Last.fm: nothing playing")
        return now
