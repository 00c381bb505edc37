from __future__ import annotations

import threading
from typing import Optional, Protocol

from . import log
from .models import NowPlaying
from .state import CLEARED, SyncState, is_cleared, is_unchanged, remember_written

# Slack rejects longer status texts
MAX_STATUS_LEN = 100
ELLIPSIS = "..."


class NowPlayingSource(Protocol):
    def fetch_current(self) -> Optional[NowPlaying]: ...


class StatusSink(Protocol):
    def write(self, text: str, emoji: str) -> bool: ...


def format_status_text(now: Optional[NowPlaying]) -> str:
    if now is None:
        return ""
    text = f"{now.track} - {now.artist}"
    if len(text) > MAX_STATUS_LEN:
        text = text[: MAX_STATUS_LEN - len(ELLIPSIS)] + ELLIPSIS
    return text


class SyncLoop:
    """
    Mirrors Last.fm "now playing" into the Slack status.

    One tick: read the source, render the status text, and write it through
    the sink only when it differs from the last confirmed write. A failed
    write leaves the state untouched, so the next tick tries again.
    """

    def __init__(
        self,
        source: NowPlayingSource,
        sink: StatusSink,
        *,
        emoji: str,
        clear_when_idle: bool = True,
        state: Optional[SyncState] = None,
    ):
        self.source = source
        self.sink = sink
        self.emoji = emoji
        self.clear_when_idle = clear_when_idle
        self.state = state if state is not None else SyncState()
        self._busy = threading.Lock()

    def tick(self) -> bool:
        """Returns True when a write went through on this tick."""
        if not self._busy.acquire(blocking=False):
            log.warn("Previous tick still running, skipping")
            return False
        try:
            return self._tick()
        finally:
            self._busy.release()

    def _tick(self) -> bool:
        now = self.source.fetch_current()
        text = format_status_text(now)

        if is_unchanged(self.state, text):
            return False

        if now is not None:
            log.info(f"Now playing: {now.track} - {now.artist}")
            if self.sink.write(text, self.emoji):
                remember_written(self.state, text)
                log.info("Slack status updated")
                return True
            return False

        if self.clear_when_idle and not is_cleared(self.state):
            log.info("Nothing playing, clearing status")
            if self.sink.write(CLEARED, ""):
                remember_written(self.state, CLEARED)
                log.info("Slack status cleared")
                return True
        return False

    def shutdown(self) -> None:
        # waits for an in-flight tick so the two never interleave
        with self._busy:
            if not self.clear_when_idle:
                return
            if self.sink.write(CLEARED, ""):
                remember_written(self.state, CLEARED)
                log.info("Status cleared on exit")
            else:
                log.warn("Could not clear status on exit")
