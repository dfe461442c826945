"""
Editor Reducer

Pure state transitions for the form editor:
- Component actions run against the current page's component tree
- Page actions add, delete, rename, switch and reorder pages
- Form actions rename the template or reset it

``reduce_editor_state`` never mutates its input. It reports whether the state
changed and whether the change belongs in history; selection and page switches
change state without being recorded. Rejections (full row, last page, ...)
come back on the result with the original state.
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from formcanvas.config import get_settings
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
from formcanvas.models.contracts.components import FormPage
from formcanvas.models.contracts.drag_drop import DropIntent, NewItemPayload
from formcanvas.models.contracts.editor import ActionResult, EditorState
from formcanvas.models.enums import RejectionReason
from formcanvas.services.component_factory import generate_component_id
from formcanvas.services.component_tree import (
    FormTree,
    clone_component,
    collect_ids,
    find_component,
    insert_at,
    locate_component,
    move_within_container,
    move_within_siblings,
    remove_component,
    update_component,
)
from formcanvas.services.row_layout import add_to_row
from formcanvas.services.smart_insert import apply_smart_drop

logger = logging.getLogger(__name__)


# =============================================================================
# State Construction
# =============================================================================


def create_page(title: str, page_id: str | None = None) -> FormPage:
    return FormPage(id=page_id or generate_component_id("page"), title=title, components=[])


def initial_editor_state(template_name: str | None = None) -> EditorState:
    """A form with one empty page, selected as current."""
    page = create_page("Page 1", "page-1")
    return EditorState(
        template_name=template_name or get_settings().default_template_name,
        pages=[page],
        current_page_id=page.id,
    )


# =============================================================================
# Helpers
# =============================================================================


def _unchanged(state: EditorState, rejected: RejectionReason | None = None) -> ActionResult:
    return ActionResult(
        state=state,
        changed=False,
        record=False,
        rejected=rejected,
        message=rejected.value if rejected else None,
    )


def _committed(state: EditorState, **update: Any) -> ActionResult:
    return ActionResult(state=state.model_copy(update=update), changed=True, record=True)


def _with_components(state: EditorState, components: FormTree, **update: Any) -> ActionResult:
    """Swap the current page's tree, or report a no-op when it did not change."""
    page = state.current_page
    if page is None or components is page.components:
        return _unchanged(state)

    pages = [
        p.model_copy(update={"components": components}) if p.id == page.id else p
        for p in state.pages
    ]
    return _committed(state, pages=pages, **update)


def _page_index(state: EditorState, page_id: str) -> int | None:
    for index, page in enumerate(state.pages):
        if page.id == page_id:
            return index
    return None


# =============================================================================
# Component Actions
# =============================================================================


def _add_component(state: EditorState, action: AddComponentAction) -> ActionResult:
    intent = None
    if action.target_id is not None:
        intent = DropIntent(position=action.position, target_id=action.target_id)
    return _drop(
        state,
        DropComponentAction(
            payload=NewItemPayload(component_type=action.component_type), intent=intent
        ),
    )


def _drop(state: EditorState, action: DropComponentAction) -> ActionResult:
    result = apply_smart_drop(state.components, action.payload, action.intent, action.target_id)
    if not result.ok:
        return _unchanged(state, result.rejected)
    return _with_components(state, result.tree, selected_id=result.selected_id)


def _update_component(state: EditorState, action: UpdateComponentAction) -> ActionResult:
    try:
        updated = update_component(state.components, action.component_id, action.patch)
    except ValidationError as e:
        logger.warning(
            f"Rejected patch for '{action.component_id}': {e.error_count()} invalid value(s)"
        )
        return _unchanged(state, RejectionReason.INVALID_PATCH)
    return _with_components(state, updated)


def _delete_component(state: EditorState, action: DeleteComponentAction) -> ActionResult:
    target = find_component(state.components, action.component_id)
    if target is None:
        return _unchanged(state)

    selected_id = state.selected_id
    if selected_id is not None and selected_id in collect_ids(target):
        selected_id = None

    return _with_components(
        state,
        remove_component(state.components, action.component_id),
        selected_id=selected_id,
    )


def _duplicate_component(state: EditorState, action: DuplicateComponentAction) -> ActionResult:
    tree = state.components
    location = locate_component(tree, action.component_id)
    if location is None:
        return _unchanged(state)

    clone = clone_component(location.component)
    if location.in_row:
        result = add_to_row(tree, location.parent_id, clone, location.index + 1)
        if not result.ok:
            return _unchanged(state, result.rejected)
        updated = result.tree
    else:
        updated = insert_at(tree, location.parent_id, location.index + 1, clone)

    logger.info(f"Duplicated '{action.component_id}' as '{clone.id}'")
    return _with_components(state, updated, selected_id=clone.id)


def _move_component(state: EditorState, action: MoveComponentAction) -> ActionResult:
    if action.container_id is None:
        updated = move_within_siblings(state.components, action.from_index, action.to_index)
    else:
        updated = move_within_container(
            state.components, action.container_id, action.from_index, action.to_index
        )
    return _with_components(state, updated)


def _select_component(state: EditorState, action: SelectComponentAction) -> ActionResult:
    component_id = action.component_id
    if component_id is not None and find_component(state.components, component_id) is None:
        return _unchanged(state)
    if component_id == state.selected_id:
        return _unchanged(state)
    return ActionResult(
        state=state.model_copy(update={"selected_id": component_id}), changed=True, record=False
    )


# =============================================================================
# Page Actions
# =============================================================================


def _add_page(state: EditorState, action: AddPageAction) -> ActionResult:
    page = create_page(action.title or f"Page {len(state.pages) + 1}")
    logger.info(f"Added page '{page.id}' ({page.title})")
    return _committed(
        state, pages=[*state.pages, page], current_page_id=page.id, selected_id=None
    )


def _delete_page(state: EditorState, action: DeletePageAction) -> ActionResult:
    index = _page_index(state, action.page_id)
    if index is None:
        return _unchanged(state)
    if len(state.pages) <= 1:
        logger.warning(f"Refusing to delete '{action.page_id}': it is the last page")
        return _unchanged(state, RejectionReason.LAST_PAGE)

    pages = [p for p in state.pages if p.id != action.page_id]
    current_page_id = state.current_page_id
    if current_page_id == action.page_id:
        current_page_id = pages[0].id

    logger.info(f"Deleted page '{action.page_id}'")
    return _committed(state, pages=pages, current_page_id=current_page_id, selected_id=None)


def _rename_page(state: EditorState, action: RenamePageAction) -> ActionResult:
    index = _page_index(state, action.page_id)
    if index is None or state.pages[index].title == action.title:
        return _unchanged(state)

    pages = list(state.pages)
    pages[index] = pages[index].model_copy(update={"title": action.title})
    return _committed(state, pages=pages)


def _switch_page(state: EditorState, action: SwitchPageAction) -> ActionResult:
    if _page_index(state, action.page_id) is None or action.page_id == state.current_page_id:
        return _unchanged(state)
    return ActionResult(
        state=state.model_copy(
            update={"current_page_id": action.page_id, "selected_id": None}
        ),
        changed=True,
        record=False,
    )


def _reorder_pages(state: EditorState, action: ReorderPagesAction) -> ActionResult:
    pages = move_within_siblings(state.pages, action.from_index, action.to_index)
    if pages is state.pages:
        return _unchanged(state)
    return _committed(state, pages=pages)


def _clear_page(state: EditorState, action: ClearPageAction) -> ActionResult:
    page_id = action.page_id or (state.current_page.id if state.current_page else None)
    index = _page_index(state, page_id) if page_id else None
    if index is None or not state.pages[index].components:
        return _unchanged(state)

    pages = list(state.pages)
    pages[index] = pages[index].model_copy(update={"components": []})
    logger.info(f"Cleared page '{page_id}'")
    return _committed(state, pages=pages, selected_id=None)


# =============================================================================
# Form Actions
# =============================================================================


def _set_template_name(state: EditorState, action: SetTemplateNameAction) -> ActionResult:
    if action.name == state.template_name:
        return _unchanged(state)
    return _committed(state, template_name=action.name)


def _clear_all(state: EditorState, action: ClearAllAction) -> ActionResult:
    fresh = initial_editor_state(state.template_name)
    if fresh.model_dump() == state.model_dump():
        return _unchanged(state)
    logger.info("Cleared all pages")
    return ActionResult(state=fresh, changed=True, record=True)


_HANDLERS: dict[type, Callable[[EditorState, Any], ActionResult]] = {
    AddComponentAction: _add_component,
    UpdateComponentAction: _update_component,
    DeleteComponentAction: _delete_component,
    DuplicateComponentAction: _duplicate_component,
    MoveComponentAction: _move_component,
    DropComponentAction: _drop,
    SelectComponentAction: _select_component,
    AddPageAction: _add_page,
    DeletePageAction: _delete_page,
    RenamePageAction: _rename_page,
    SwitchPageAction: _switch_page,
    ReorderPagesAction: _reorder_pages,
    ClearPageAction: _clear_page,
    SetTemplateNameAction: _set_template_name,
    ClearAllAction: _clear_all,
}


def reduce_editor_state(state: EditorState, action: EditorAction) -> ActionResult:
    """
    Apply one action to the editor state.

    Args:
        state: Current state (left untouched)
        action: Any member of the EditorAction union

    Returns:
        ActionResult with the next state, whether it changed, whether it
        should be recorded in history and any rejection reason

    Raises:
        TypeError: If ``action`` is not an EditorAction
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported editor action: {type(action).__name__}")
    return handler(state, action)
