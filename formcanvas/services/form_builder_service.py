"""
Form Builder Service

One editing session: owns the live EditorState and its HistoryState and is
the only place either is replaced. Every change goes through ``dispatch``,
which reduces the action and records a snapshot when the document changed.
"""

import logging
from typing import Any

from formcanvas.models.contracts.actions import (
    AddComponentAction,
    AddPageAction,
    ClearAllAction,
    ClearPageAction,
    DeleteComponentAction,
    DeletePageAction,
    DropComponentAction,
    DuplicateComponentAction,
    EditorAction,
    MoveComponentAction,
    RenamePageAction,
    ReorderPagesAction,
    SelectComponentAction,
    SetTemplateNameAction,
    SwitchPageAction,
    UpdateComponentAction,
)
from formcanvas.models.contracts.components import FormComponent
from formcanvas.models.contracts.drag_drop import DragPayload, DropIntent, Point, Rect
from formcanvas.models.contracts.editor import ActionResult, EditorState, HistoryState
from formcanvas.models.contracts.export_import import ImportResult
from formcanvas.models.enums import DropPosition
from formcanvas.services import history as history_service
from formcanvas.services.component_tree import find_component
from formcanvas.services.document_service import export_document, import_document
from formcanvas.services.drop_zone import DropZoneConfig, build_drop_intent
from formcanvas.services.editor_reducer import initial_editor_state, reduce_editor_state

logger = logging.getLogger(__name__)


class FormBuilderService:
    """
    Editing session for one form.

    Usage:
        service = FormBuilderService()
        result = service.add_component("text_input")
        service.undo()
        document = service.export_json()
    """

    def __init__(
        self,
        state: EditorState | None = None,
        history_capacity: int | None = None,
        drop_zone_config: DropZoneConfig | None = None,
    ):
        self._state = state.model_copy(deep=True) if state else initial_editor_state()
        self._history = history_service.record_snapshot(
            history_service.create_history(history_capacity), self._state
        )
        self._drop_zone_config = drop_zone_config

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def history(self) -> HistoryState:
        return self._history

    @property
    def components(self) -> list[FormComponent]:
        """Root components of the current page."""
        return self._state.components

    @property
    def selected_component(self) -> FormComponent | None:
        if self._state.selected_id is None:
            return None
        return find_component(self.components, self._state.selected_id)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def dispatch(self, action: EditorAction) -> ActionResult:
        """Reduce ``action`` against the live state and commit the outcome."""
        result = reduce_editor_state(self._state, action)
        if not result.changed:
            return result

        self._state = result.state
        if result.record:
            self._history = history_service.record_snapshot(self._history, self._state)
            logger.debug(f"Recorded {action.action} (cursor {self._history.cursor})")
        return result

    # -------------------------------------------------------------------------
    # Undo / Redo
    # -------------------------------------------------------------------------

    def _restore(self, moved: HistoryState) -> bool:
        if moved is self._history:
            return False
        self._history = moved
        self._state = history_service.restore(moved)
        return True

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when there is nothing to undo."""
        return self._restore(history_service.undo(self._history))

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False when there is nothing to redo."""
        return self._restore(history_service.redo(self._history))

    # -------------------------------------------------------------------------
    # Component Operations
    # -------------------------------------------------------------------------

    def add_component(
        self,
        component_type: str,
        target_id: str | None = None,
        position: DropPosition = DropPosition.NONE,
    ) -> ActionResult:
        return self.dispatch(
            AddComponentAction(
                component_type=component_type, target_id=target_id, position=position
            )
        )

    def update_component(self, component_id: str, patch: dict[str, Any]) -> ActionResult:
        return self.dispatch(UpdateComponentAction(component_id=component_id, patch=patch))

    def delete_component(self, component_id: str) -> ActionResult:
        return self.dispatch(DeleteComponentAction(component_id=component_id))

    def duplicate_component(self, component_id: str) -> ActionResult:
        return self.dispatch(DuplicateComponentAction(component_id=component_id))

    def move_component(
        self, from_index: int, to_index: int, container_id: str | None = None
    ) -> ActionResult:
        return self.dispatch(
            MoveComponentAction(
                from_index=from_index, to_index=to_index, container_id=container_id
            )
        )

    def drop(
        self,
        payload: DragPayload,
        intent: DropIntent | None,
        target_id: str | None = None,
    ) -> ActionResult:
        return self.dispatch(
            DropComponentAction(payload=payload, intent=intent, target_id=target_id)
        )

    def select_component(self, component_id: str | None) -> ActionResult:
        return self.dispatch(SelectComponentAction(component_id=component_id))

    def preview_drop(self, pointer: Point, rect: Rect, target_id: str) -> DropIntent | None:
        """
        Classify a hover over a target without touching state or history.

        Returns None when the target is unknown, the pointer is outside it or
        it sits over a row's blocked center.
        """
        target = find_component(self.components, target_id)
        if target is None:
            return None
        return build_drop_intent(pointer, rect, target, self._drop_zone_config)

    # -------------------------------------------------------------------------
    # Page Operations
    # -------------------------------------------------------------------------

    def add_page(self, title: str | None = None) -> ActionResult:
        return self.dispatch(AddPageAction(title=title))

    def delete_page(self, page_id: str) -> ActionResult:
        return self.dispatch(DeletePageAction(page_id=page_id))

    def rename_page(self, page_id: str, title: str) -> ActionResult:
        return self.dispatch(RenamePageAction(page_id=page_id, title=title))

    def switch_page(self, page_id: str) -> ActionResult:
        return self.dispatch(SwitchPageAction(page_id=page_id))

    def reorder_pages(self, from_index: int, to_index: int) -> ActionResult:
        return self.dispatch(ReorderPagesAction(from_index=from_index, to_index=to_index))

    def clear_page(self, page_id: str | None = None) -> ActionResult:
        return self.dispatch(ClearPageAction(page_id=page_id))

    # -------------------------------------------------------------------------
    # Form Operations
    # -------------------------------------------------------------------------

    def set_template_name(self, name: str) -> ActionResult:
        return self.dispatch(SetTemplateNameAction(name=name))

    def clear_all(self) -> ActionResult:
        return self.dispatch(ClearAllAction())

    def export_json(self) -> str:
        return export_document(self._state)

    def import_json(self, text: str) -> ImportResult:
        """
        Replace the form with an imported document.

        A successful import is recorded like any other edit, so it can be
        undone. A failed import leaves state and history exactly as they were.
        """
        result = import_document(text)
        if not result.success:
            return result

        self._state = result.state.model_copy(deep=True)
        self._history = history_service.record_snapshot(self._history, self._state)
        return result
