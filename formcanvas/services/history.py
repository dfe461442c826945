"""
History Manager

Undo/redo over full-state snapshots held in an immutable HistoryState:

- record_snapshot: drop the redo branch, append, move the cursor to the end,
  and forget the oldest entry once past capacity
- undo / redo: move the cursor one step (no-op at either end)

Snapshots are deep copies when stored and when handed back, so later edits
to a live state can never reach into the history.
"""

import logging

from formcanvas.config import get_settings
from formcanvas.models.contracts.editor import EditorState, HistorySnapshot, HistoryState

logger = logging.getLogger(__name__)


def create_history(capacity: int | None = None) -> HistoryState:
    """Empty history using the configured capacity by default."""
    return HistoryState(capacity=capacity or get_settings().history_capacity)


def record_snapshot(history: HistoryState, state: EditorState) -> HistoryState:
    """Append a deep copy of ``state`` after the cursor, truncating any redo branch."""
    entries = list(history.entries[: history.cursor + 1])
    entries.append(HistorySnapshot(state=state.model_copy(deep=True)))

    if len(entries) > history.capacity:
        dropped = len(entries) - history.capacity
        entries = entries[dropped:]
        logger.debug(f"History full, dropped {dropped} oldest snapshot(s)")

    return history.model_copy(
        update={"entries": tuple(entries), "cursor": len(entries) - 1}
    )


def undo(history: HistoryState) -> HistoryState:
    """Step back one snapshot. Returns the same object when there is nothing to undo."""
    if not history.can_undo:
        return history
    return history.model_copy(update={"cursor": history.cursor - 1})


def redo(history: HistoryState) -> HistoryState:
    """Step forward one snapshot. Returns the same object when there is nothing to redo."""
    if not history.can_redo:
        return history
    return history.model_copy(update={"cursor": history.cursor + 1})


def restore(history: HistoryState) -> EditorState | None:
    """Deep copy of the state at the cursor, safe for the caller to edit."""
    snapshot = history.current
    if snapshot is None:
        return None
    return snapshot.state.model_copy(deep=True)
