"""
Document export/import contract models.
"""

from __future__ import annotations

from pydantic import Field

from formcanvas.models.contracts.components import CamelModel, FormPage
from formcanvas.models.contracts.editor import EditorState
from formcanvas.models.enums import ImportErrorKind


class FormDocument(CamelModel):
    """
    Serialized form document.

    Wire format:
        {"templateName": "...", "pages": [{"id", "title", "components": [...]}],
         "version": "2.1-multipage"}
    """

    template_name: str = Field(default="Imported Form", description="Form title")
    pages: list[FormPage] = Field(default_factory=list, description="Form pages, in order")
    version: str = Field(default="2.1-multipage", description="Document format version")


class ImportResult(CamelModel):
    """Outcome of an import. ``state`` is set only on success."""

    success: bool
    state: EditorState | None = None
    error_kind: ImportErrorKind | None = None
    error: str | None = None
