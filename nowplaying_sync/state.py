from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# "" means the status was cleared, None means nothing was written yet
CLEARED = ""


@dataclass
class SyncState:
    # last status text Slack confirmed; lives only for this process
    last_status: Optional[str] = None


def is_unchanged(state: SyncState, text: str) -> bool:
    return state.last_status == text


def is_cleared(state: SyncState) -> bool:
    return state.last_status == CLEARED


def remember_written(state: SyncState, text: str) -> None:
    """
    Only called after Slack accepted the write, so last_status keeps
    matching what is actually visible on the profile.
    """
    state.last_status = text
