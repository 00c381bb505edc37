from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NowPlaying:
    artist: str
    track: str
    album: Optional[str] = None
    image_url: Optional[str] = None
