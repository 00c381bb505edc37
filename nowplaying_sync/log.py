from __future__ import annotations
import os
import sys
from datetime import datetime
from typing import Iterable

def _ts() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

def _emit(level: str, msg: str, stream=None) -> None:
    print(f"[{_ts()}] {level:<5} {msg}", file=stream or sys.stdout, flush=True)

def debug(msg: str) -> None:
    # read per call so a value loaded from .env still applies
    if os.getenv("NOWPLAYING_DEBUG") == "1":
        _emit("DEBUG", msg)

def info(msg: str) -> None:
    _emit("INFO", msg)

def warn(msg: str) -> None:
    _emit("WARN", msg, sys.stderr)

def error(msg: str) -> None:
    _emit("ERROR", msg, sys.stderr)

def banner(lines: Iterable[str]) -> None:
    # startup banner goes out without timestamps
    for line in lines:
        print(line, flush=True)
