"""
Row Layout Service

Lifecycle of horizontal row containers:
- Creation: wrapping a standalone target and a dropped component in a new row
- Growth: inserting next to a component that already lives in a row
- Capacity: a row never holds more than ``row_capacity`` children
- Dissolution: a row left with one child or none disappears in the same
  mutation that emptied it (the sole child takes the row's place)
- Row drags: rows only move vertically and never into themselves
"""

import logging
from dataclasses import dataclass

from formcanvas.config import get_settings
from formcanvas.models.contracts.components import FormComponent
from formcanvas.models.enums import ComponentType, DropPosition, RejectionReason
from formcanvas.services.component_factory import DEFAULT_COMPONENT_LABELS, generate_component_id
from formcanvas.services.component_tree import (
    FormTree,
    collect_ids,
    find_component,
    locate_component,
    replace_component,
)

logger = logging.getLogger(__name__)


@dataclass
class RowEditResult:
    """Result of a row edit. ``tree`` is the input tree when rejected."""

    tree: FormTree
    rejected: RejectionReason | None = None

    @property
    def ok(self) -> bool:
        return self.rejected is None


def create_row(first: FormComponent, second: FormComponent) -> FormComponent:
    """Build a new row holding two components, in order."""
    return FormComponent(
        id=f"row-{generate_component_id('layout')}",
        type=ComponentType.ROW,
        label=DEFAULT_COMPONENT_LABELS[ComponentType.ROW],
        children=[first, second],
    )


def row_has_capacity(row: FormComponent, row_capacity: int | None = None) -> bool:
    capacity = row_capacity or get_settings().row_capacity
    return len(row.children or []) < capacity


def wrap_in_row(
    tree: FormTree,
    target_id: str,
    component: FormComponent,
    position: DropPosition,
) -> RowEditResult:
    """
    Replace a standalone target with a new row holding target and component.

    ``left`` puts the component first, ``right`` puts the target first. The
    row takes the target's old position in its parent collection.
    """
    target = find_component(tree, target_id)
    if target is None:
        return RowEditResult(tree=tree)

    if position == DropPosition.LEFT:
        row = create_row(component, target)
    else:
        row = create_row(target, component)

    logger.info(f"Created row '{row.id}' around '{target_id}' ({position.value})")
    return RowEditResult(tree=replace_component(tree, target_id, [row]))


def add_to_row(
    tree: FormTree,
    row_id: str,
    component: FormComponent,
    index: int | None = None,
    row_capacity: int | None = None,
) -> RowEditResult:
    """
    Insert a component into an existing row at ``index`` (None appends).

    Rejected with ROW_AT_CAPACITY when the row is already full.
    """
    row = find_component(tree, row_id)
    if row is None or row.type != ComponentType.ROW:
        return RowEditResult(tree=tree)

    if not row_has_capacity(row, row_capacity):
        logger.warning(f"Row '{row_id}' is full ({len(row.children)} children)")
        return RowEditResult(tree=tree, rejected=RejectionReason.ROW_AT_CAPACITY)

    children = list(row.children)
    position = len(children) if index is None else max(0, min(index, len(children)))
    children.insert(position, component)
    updated = row.model_copy(update={"children": children})
    return RowEditResult(tree=replace_component(tree, row_id, [updated]))


def add_beside(
    tree: FormTree,
    target_id: str,
    component: FormComponent,
    position: DropPosition,
    row_capacity: int | None = None,
) -> RowEditResult:
    """
    Place a component left or right of a target, creating a row if needed.

    - Target inside a row: insert next to it in that row (capacity checked)
    - Target is itself a row: insert at the row's start (left) or end (right)
    - Otherwise: wrap target and component in a new row
    """
    location = locate_component(tree, target_id)
    if location is None:
        return RowEditResult(tree=tree)

    if location.in_row:
        index = location.index if position == DropPosition.LEFT else location.index + 1
        return add_to_row(tree, location.parent_id, component, index, row_capacity)

    if location.component.type == ComponentType.ROW:
        index = 0 if position == DropPosition.LEFT else None
        return add_to_row(tree, target_id, component, index, row_capacity)

    return wrap_in_row(tree, target_id, component, position)


# =============================================================================
# Dissolution
# =============================================================================


def _dissolve(row: FormComponent, reason: str) -> list[FormComponent]:
    remaining = list(row.children or [])
    if remaining:
        logger.info(f"Row '{row.id}' dissolved ({reason}); promoted '{remaining[0].id}'")
    else:
        logger.info(f"Row '{row.id}' dissolved ({reason}); nothing left")
    return remaining


def dissolve_if_needed(tree: FormTree, container_id: str) -> FormTree:
    """
    Dissolve one row if it holds one child or none.

    0 children: the row is removed. 1 child: the child replaces the row in
    place. Otherwise (or for non-row/unknown ids) the tree is unchanged.
    """
    row = find_component(tree, container_id)
    if row is None or row.type != ComponentType.ROW:
        return tree
    if len(row.children or []) > 1:
        return tree
    return replace_component(tree, container_id, _dissolve(row, "explicit"))


def normalize_rows(tree: FormTree) -> FormTree:
    """
    Dissolve every degenerate row anywhere in the tree.

    Returns the original list object when nothing changed.
    """
    visited: set[str] = set()

    def _walk(components: list[FormComponent]) -> list[FormComponent]:
        result: list[FormComponent] = []
        changed = False
        for component in components:
            if component.id in visited:
                result.append(component)
                continue
            visited.add(component.id)

            if component.children:
                children = _walk(component.children)
                if children is not component.children:
                    component = component.model_copy(update={"children": children})
                    changed = True

            if component.type == ComponentType.ROW and len(component.children or []) <= 1:
                result.extend(_dissolve(component, "removal"))
                changed = True
                continue
            result.append(component)
        return result if changed else components

    return _walk(tree)


# =============================================================================
# Row Drags
# =============================================================================


def validate_row_drop(
    row: FormComponent,
    target_id: str | None,
    position: DropPosition,
) -> RejectionReason | None:
    """
    Check a drop whose payload is a row.

    Rows may only be placed before/after a target, and never onto one of
    their own descendants.
    """
    if position in (DropPosition.LEFT, DropPosition.RIGHT):
        return RejectionReason.ROW_HORIZONTAL
    if position == DropPosition.INSIDE:
        return RejectionReason.ROW_NESTING
    if target_id is not None and target_id != row.id and target_id in collect_ids(row):
        return RejectionReason.CIRCULAR_PLACEMENT
    return None
