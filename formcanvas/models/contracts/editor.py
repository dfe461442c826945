"""
Editor state and history contract models.
"""

from __future__ import annotations

from pydantic import ConfigDict, Field

from formcanvas.models.contracts.components import CamelModel, FormComponent, FormPage
from formcanvas.models.enums import RejectionReason


class EditorState(CamelModel):
    """Everything a single editing session edits and undoes."""

    template_name: str = Field(default="Untitled Form", description="Form title")
    pages: list[FormPage] = Field(default_factory=list, description="Form pages, in order")
    current_page_id: str | None = Field(default=None, description="Page being edited")
    selected_id: str | None = Field(default=None, description="Selected component id")

    @property
    def current_page(self) -> FormPage | None:
        for page in self.pages:
            if page.id == self.current_page_id:
                return page
        return self.pages[0] if self.pages else None

    @property
    def components(self) -> list[FormComponent]:
        """Root components of the current page."""
        page = self.current_page
        return page.components if page else []


class ActionResult(CamelModel):
    """
    Outcome of reducing one editor action.

    ``changed`` is False for no-ops (unknown ids, rejected drops).
    ``record`` tells the session whether the new state belongs in history;
    selection and page switches change state without being recorded.
    """

    state: EditorState
    changed: bool = False
    record: bool = False
    rejected: RejectionReason | None = None
    message: str | None = None


class HistorySnapshot(CamelModel):
    """Frozen deep copy of an editor state."""

    model_config = ConfigDict(frozen=True)

    state: EditorState


class HistoryState(CamelModel):
    """
    Bounded list of snapshots with a cursor.

    The cursor points at the snapshot matching the live state; -1 means
    nothing has been recorded yet.
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[HistorySnapshot, ...] = ()
    cursor: int = -1
    capacity: int = Field(default=50, ge=1)

    @property
    def current(self) -> HistorySnapshot | None:
        if 0 <= self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self.cursor < len(self.entries) - 1
