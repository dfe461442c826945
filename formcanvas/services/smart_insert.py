"""
Smart Insert Engine

Turns a drop (payload + intent) into a new tree:

    before/after   insert next to the target in its parent collection
    left/right     grow or create a row around the target
    inside         append to a container target
    none           append to the root (also when the target is missing)

Existing components are removed from their old place first (dissolving the
row they leave if needed) and only then inserted, so a component is never in
two places at once. Structural problems (full row, row dragged sideways, row
nesting, circular placement) come back as a rejection on the result with the
original tree; nothing here raises for user input. Rows are never dropped
from the palette: they only appear when a component is placed beside another.
"""

import logging

from formcanvas.config import get_settings
from formcanvas.models.contracts.components import FormComponent
from formcanvas.models.contracts.drag_drop import (
    DragPayload,
    DropIntent,
    DropResult,
    ExistingItemPayload,
    NewItemPayload,
)
from formcanvas.models.enums import ComponentType, DropPosition, RejectionReason
from formcanvas.services.component_factory import create_component, resolve_component_type
from formcanvas.services.component_tree import (
    FormTree,
    assert_tree_invariants,
    collect_ids,
    contains_row,
    extract_component,
    find_component,
    insert_at,
    locate_component,
    validate_tree,
)
from formcanvas.services.row_layout import (
    add_beside,
    add_to_row,
    normalize_rows,
    validate_row_drop,
)

logger = logging.getLogger(__name__)


def _reject(tree: FormTree, reason: RejectionReason) -> DropResult:
    logger.warning(f"Drop rejected: {reason.value}")
    return DropResult(tree=tree, selected_id=None, rejected=reason, message=reason.value)


def _resolve_target(
    original: FormTree,
    working: FormTree,
    target_id: str | None,
    source_id: str | None,
) -> str | None:
    """
    Find the target in the tree after the source was taken out.

    If the target was a row that dissolved because the source left it, the
    surviving child now occupies the row's position and becomes the target.
    """
    if target_id is None or find_component(working, target_id) is not None:
        return target_id

    before = find_component(original, target_id)
    if before is not None and before.type == ComponentType.ROW:
        remaining = [c for c in before.children if c.id != source_id]
        if len(remaining) == 1:
            return remaining[0].id
    return None


def _insert_vertical(
    tree: FormTree,
    target_id: str,
    component: FormComponent,
    position: DropPosition,
    row_capacity: int,
) -> DropResult | FormTree:
    """Insert before/after the target; returns a rejection or the new tree."""
    location = locate_component(tree, target_id)

    if location.in_row and contains_row(component):
        # Rows stay vertical: place relative to the enclosing row instead
        location = locate_component(tree, location.parent_id)

    if contains_row(component) and location.under_row:
        return _reject(tree, RejectionReason.ROW_NESTING)

    index = location.index if position == DropPosition.BEFORE else location.index + 1

    if location.in_row:
        result = add_to_row(tree, location.parent_id, component, index, row_capacity)
        if not result.ok:
            return _reject(tree, result.rejected)
        return result.tree

    return insert_at(tree, location.parent_id, index, component)


def _insert_horizontal(
    tree: FormTree,
    target_id: str,
    component: FormComponent,
    position: DropPosition,
    row_capacity: int,
) -> DropResult | FormTree:
    """Insert left/right of the target, creating or growing a row."""
    location = locate_component(tree, target_id)

    # Containers enclosing the row that will hold the component
    outer = location.ancestors[:-1] if location.in_row else location.ancestors
    wraps_target = not location.in_row and not location.component.is_row

    if (
        contains_row(component)
        or any(a.is_row for a in outer)
        or (wraps_target and contains_row(location.component))
    ):
        return _reject(tree, RejectionReason.ROW_NESTING)

    result = add_beside(tree, target_id, component, position, row_capacity)
    if not result.ok:
        return _reject(tree, result.rejected)
    return result.tree


def _insert_inside(
    tree: FormTree,
    target_id: str,
    component: FormComponent,
    row_capacity: int,
) -> DropResult | FormTree:
    """Append to a container target."""
    location = locate_component(tree, target_id)
    target = location.component

    if not target.is_container:
        return _reject(tree, RejectionReason.TARGET_NOT_CONTAINER)

    if contains_row(component) and (target.is_row or location.under_row):
        return _reject(tree, RejectionReason.ROW_NESTING)

    if target.is_row:
        result = add_to_row(tree, target_id, component, None, row_capacity)
        if not result.ok:
            return _reject(tree, result.rejected)
        return result.tree

    return insert_at(tree, target_id, None, component)


def apply_smart_drop(
    tree: FormTree,
    payload: DragPayload,
    intent: DropIntent | None,
    target_id: str | None = None,
) -> DropResult:
    """
    Apply a drop to the tree.

    Args:
        tree: Current root component list (left untouched)
        payload: New palette item or existing component being moved
        intent: Classified position; None means "append to the root"
        target_id: Overrides ``intent.target_id`` when given

    Returns:
        DropResult with the new tree and the id of the placed component, or
        the original tree and a rejection reason
    """
    settings = get_settings()
    row_capacity = settings.row_capacity
    position = intent.position if intent else DropPosition.NONE
    target_id = target_id if target_id is not None else (intent.target_id if intent else None)

    # Resolve the component being placed and the tree it is placed into
    if isinstance(payload, NewItemPayload):
        component_type = resolve_component_type(payload.component_type)
        if component_type == ComponentType.ROW:
            # An empty row would dissolve on the spot
            return _reject(tree, RejectionReason.ROW_NEEDS_PAIR)
        component = create_component(component_type)
        working = tree
        source_id = None
    elif isinstance(payload, ExistingItemPayload):
        source_id = payload.source_id
        if target_id == source_id:
            # Dropping a component onto itself changes nothing
            return DropResult(tree=tree, selected_id=source_id)

        current = find_component(tree, source_id)
        if current is None:
            return _reject(tree, RejectionReason.SOURCE_NOT_FOUND)

        if target_id is not None and target_id in collect_ids(current):
            return _reject(tree, RejectionReason.CIRCULAR_PLACEMENT)

        if current.type == ComponentType.ROW and position != DropPosition.NONE:
            reason = validate_row_drop(current, target_id, position)
            if reason is not None:
                return _reject(tree, reason)

        working, component = extract_component(tree, source_id)
        working = normalize_rows(working)
    else:
        raise TypeError(f"Unsupported drag payload: {type(payload).__name__}")

    target_id = _resolve_target(tree, working, target_id, source_id)

    if position == DropPosition.NONE or target_id is None:
        outcome: DropResult | FormTree = insert_at(working, None, None, component)
    elif position in (DropPosition.BEFORE, DropPosition.AFTER):
        outcome = _insert_vertical(working, target_id, component, position, row_capacity)
    elif position in (DropPosition.LEFT, DropPosition.RIGHT):
        outcome = _insert_horizontal(working, target_id, component, position, row_capacity)
    else:
        outcome = _insert_inside(working, target_id, component, row_capacity)

    if isinstance(outcome, DropResult):
        # Rejections always hand back the caller's tree, not the working copy
        return DropResult(
            tree=tree, selected_id=None, rejected=outcome.rejected, message=outcome.message
        )

    # Only trees that arrived valid are held to the invariants afterwards
    if settings.check_invariants and not validate_tree(tree, row_capacity):
        assert_tree_invariants(outcome, row_capacity)

    logger.info(
        f"Placed '{component.id}' ({component.type.value}) "
        f"{position.value} {target_id or 'root'}"
    )
    return DropResult(tree=outcome, selected_id=component.id)
