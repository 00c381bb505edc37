from __future__ import annotations

import signal
import sys
import threading
import time

from .config import Config, ConfigError, load_config, require_complete
from . import log
from .lastfm import LastfmSource
from .slack import SlackSink
from .sync import SyncLoop


def build_loop(cfg: Config) -> SyncLoop:
    return SyncLoop(
        LastfmSource(cfg),
        SlackSink(cfg),
        emoji=cfg.STATUS_EMOJI,
        clear_when_idle=cfg.CLEAR_WHEN_NOT_PLAYING,
    )


def run_forever(loop: SyncLoop, interval: float, stop: threading.Event) -> None:
    """
    Ticks right away, then once per interval until stop is set.
    Ticks run one after another on this thread; a slow tick delays the
    next one instead of overlapping it.
    """
    while True:
        t0 = time.time()
        try:
            loop.tick()
        except Exception as e:
            log.error(f"Loop error: {e}")
        dt = time.time() - t0
        log.debug(f"Tick done in {dt:.2f}s")
        if stop.wait(max(0.0, interval - dt)):
            return


def install_signal_handlers(stop: threading.Event) -> None:
    def _handler(signum, frame):
        # only flag here; the shutdown write happens after the current tick
        stop.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def main() -> None:
    try:
        cfg = load_config()
        require_complete(cfg)
    except ConfigError as e:
        log.error(str(e))
        if e.missing:
            log.error("Please copy .env.example to .env and fill in your credentials.")
        sys.exit(1)

    log.banner(
        [
            "Last.fm to Slack Status Sync",
            "============================",
            f"Monitoring Last.fm user: {cfg.LASTFM_USERNAME}",
            f"Poll interval: {cfg.POLL_SECONDS} seconds",
            f"Status emoji: {cfg.STATUS_EMOJI}",
            f"Clear when not playing: {'yes' if cfg.CLEAR_WHEN_NOT_PLAYING else 'no'}",
            "",
            "Press Ctrl+C to stop",
            "",
        ]
    )

    loop = build_loop(cfg)
    stop = threading.Event()
    install_signal_handlers(stop)

    run_forever(loop, cfg.POLL_SECONDS, stop)

    log.info("Shutting down...")
    loop.shutdown()


if __name__ == "__main__":
    main()
