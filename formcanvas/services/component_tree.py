"""
Component Tree Service

Pure operations over the recursive form tree:
- Search (find, locate, iterate) with a visited-id guard
- Update, remove, insert and replace at any depth
- Sibling reordering at the root or inside a container
- Deep cloning with fresh identifiers
- Structural invariant checks

Every function returns a new list and leaves its input untouched. Unchanged
subtrees are shared between the old and new tree; nothing here mutates a
component in place. An unknown id is a no-op that returns the original tree.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from formcanvas.config import get_settings
from formcanvas.core.exceptions import TreeInvariantError
from formcanvas.models.contracts.components import FormComponent
from formcanvas.models.enums import CONTAINER_TYPES, ComponentType
from formcanvas.services.component_factory import generate_component_id

logger = logging.getLogger(__name__)


FormTree = list[FormComponent]

# Fields a patch may never overwrite
PROTECTED_FIELDS = frozenset(["id", "children"])

# camelCase alias -> attribute name, so patches accept either spelling
_ALIAS_TO_FIELD = {
    info.alias: name
    for name, info in FormComponent.model_fields.items()
    if info.alias and info.alias != name
}


@dataclass
class ComponentLocation:
    """Where a component sits in the tree."""

    component: FormComponent
    index: int  # Position inside the parent collection
    parent: FormComponent | None = None  # None for root-level components
    ancestors: list[FormComponent] = field(default_factory=list)  # Outermost first

    @property
    def parent_id(self) -> str | None:
        return self.parent.id if self.parent else None

    @property
    def in_row(self) -> bool:
        return self.parent is not None and self.parent.type == ComponentType.ROW

    @property
    def under_row(self) -> bool:
        """True when any enclosing container is a row."""
        return any(a.type == ComponentType.ROW for a in self.ancestors)

    @property
    def siblings(self) -> list[FormComponent]:
        return self.parent.children if self.parent else []


# =============================================================================
# Search
# =============================================================================


def iter_components(tree: FormTree) -> Iterator[FormComponent]:
    """Yield every component depth-first, each id at most once."""
    visited: set[str] = set()
    stack = list(reversed(tree))
    while stack:
        component = stack.pop()
        if component.id in visited:
            continue
        visited.add(component.id)
        yield component
        if component.children:
            stack.extend(reversed(component.children))


def find_component(tree: FormTree, component_id: str) -> FormComponent | None:
    """
    Find a component by id at any depth.

    A visited-id guard stops traversal of a corrupted (cyclic) tree, in
    which case the search simply reports "not found".
    """
    for component in iter_components(tree):
        if component.id == component_id:
            return component
    return None


def locate_component(tree: FormTree, component_id: str) -> ComponentLocation | None:
    """Find a component together with its parent, index and ancestors."""
    visited: set[str] = set()

    def _walk(components: list[FormComponent], ancestors: list[FormComponent]) -> ComponentLocation | None:
        parent = ancestors[-1] if ancestors else None
        for index, component in enumerate(components):
            if component.id in visited:
                continue
            visited.add(component.id)
            if component.id == component_id:
                return ComponentLocation(
                    component=component, index=index, parent=parent, ancestors=list(ancestors)
                )
            if component.children:
                found = _walk(component.children, ancestors + [component])
                if found:
                    return found
        return None

    return _walk(tree, [])


def find_parent(tree: FormTree, component_id: str) -> FormComponent | None:
    """Return the container holding the component, or None at root level."""
    location = locate_component(tree, component_id)
    return location.parent if location else None


def collect_ids(components: FormTree | FormComponent) -> set[str]:
    """All component ids in a tree or below (and including) a single node."""
    if isinstance(components, FormComponent):
        components = [components]
    return {c.id for c in iter_components(components)}


def count_components(tree: FormTree) -> int:
    return sum(1 for _ in iter_components(tree))


def contains_row(component: FormComponent) -> bool:
    """True if the component is a row or has a row anywhere below it."""
    return any(c.type == ComponentType.ROW for c in iter_components([component]))


# =============================================================================
# Structural Edits
# =============================================================================


def _splice(
    components: FormTree,
    component_id: str,
    replace: Callable[[FormComponent], list[FormComponent]],
    visited: set[str],
) -> tuple[FormTree, bool]:
    """
    Replace the component with ``replace(component)`` (zero or more nodes).

    Containers on the path to the component are copied with their new
    children; everything else is shared.
    """
    for index, component in enumerate(components):
        if component.id in visited:
            continue
        visited.add(component.id)

        if component.id == component_id:
            return components[:index] + replace(component) + components[index + 1:], True

        if component.children:
            children, found = _splice(component.children, component_id, replace, visited)
            if found:
                updated = component.model_copy(update={"children": children})
                return components[:index] + [updated] + components[index + 1:], True

    return components, False


def replace_component(
    tree: FormTree, component_id: str, replacements: list[FormComponent]
) -> FormTree:
    """Put ``replacements`` where the component was (empty list removes it)."""
    updated, found = _splice(tree, component_id, lambda _: list(replacements), set())
    return updated if found else tree


def _normalize_patch(component: FormComponent, patch: dict[str, Any]) -> dict[str, Any]:
    normalized = {_ALIAS_TO_FIELD.get(key, key): value for key, value in patch.items()}
    for key in PROTECTED_FIELDS & normalized.keys():
        logger.warning(f"Ignoring protected field '{key}' in patch for '{component.id}'")
        normalized.pop(key)

    if "type" in normalized:
        try:
            new_type = ComponentType(normalized["type"])
        except ValueError:
            new_type = None
        # Rows only come and go through the row lifecycle, never by retyping
        if (
            new_type is None
            or (new_type in CONTAINER_TYPES) != component.is_container
            or (new_type != component.type and ComponentType.ROW in (new_type, component.type))
        ):
            logger.warning(
                f"Ignoring type change {component.type.value} -> {normalized['type']!r} "
                f"for '{component.id}'"
            )
            normalized.pop("type")
    return normalized


def _apply_patch(component: FormComponent, patch: dict[str, Any]) -> FormComponent:
    data = component.model_dump(exclude={"children"})
    data.update(patch)
    if component.children is not None:
        data["children"] = component.children
    return FormComponent.model_validate(data)


def update_component(tree: FormTree, component_id: str, patch: dict[str, Any]) -> FormTree:
    """
    Merge ``patch`` into the component's own fields.

    ``id`` and ``children`` cannot be patched, and nothing can become or stop
    being a row. The merged component is re-validated, so an invalid patch
    raises pydantic's ValidationError. A patch that changes no value returns
    the original tree.
    """
    target = find_component(tree, component_id)
    if target is None:
        return tree

    normalized = _normalize_patch(target, patch)
    if not normalized:
        return tree

    patched = _apply_patch(target, normalized)
    if patched.model_dump() == target.model_dump():
        return tree

    updated, _ = _splice(tree, component_id, lambda _: [patched], set())
    return updated


def extract_component(tree: FormTree, component_id: str) -> tuple[FormTree, FormComponent | None]:
    """
    Remove a component without dissolving rows.

    Returns the new tree and the removed component (None when not found).
    Callers are responsible for row dissolution; ``remove_component`` does it.
    """
    removed: list[FormComponent] = []

    def _take(component: FormComponent) -> list[FormComponent]:
        removed.append(component)
        return []

    updated, found = _splice(tree, component_id, _take, set())
    if not found:
        return tree, None
    return updated, removed[0]


def remove_component(tree: FormTree, component_id: str) -> FormTree:
    """Remove a component at any depth and dissolve rows left with one child or none."""
    from formcanvas.services.row_layout import normalize_rows

    updated, removed = extract_component(tree, component_id)
    if removed is None:
        return tree
    return normalize_rows(updated)


def insert_at(
    tree: FormTree,
    parent_id: str | None,
    index: int | None,
    component: FormComponent,
) -> FormTree:
    """
    Insert into the root (parent_id None) or a container's children.

    ``index`` None appends; out-of-range indexes are clamped. Leaf or
    unknown parents leave the tree unchanged.
    """
    def _insert_into(siblings: list[FormComponent]) -> list[FormComponent]:
        position = len(siblings) if index is None else max(0, min(index, len(siblings)))
        return siblings[:position] + [component] + siblings[position:]

    if parent_id is None:
        return _insert_into(list(tree))

    parent = find_component(tree, parent_id)
    if parent is None or not parent.is_container:
        return tree

    return replace_component(
        tree,
        parent_id,
        [parent.model_copy(update={"children": _insert_into(list(parent.children))})],
    )


# =============================================================================
# Reordering
# =============================================================================


def move_within_siblings(tree: FormTree, from_index: int, to_index: int) -> FormTree:
    """Move the component at ``from_index`` to ``to_index`` within one collection."""
    if from_index == to_index:
        return tree
    if not (0 <= from_index < len(tree)) or not (0 <= to_index < len(tree)):
        return tree

    reordered = list(tree)
    moved = reordered.pop(from_index)
    reordered.insert(to_index, moved)
    return reordered


def move_within_container(
    tree: FormTree, container_id: str, from_index: int, to_index: int
) -> FormTree:
    """Apply ``move_within_siblings`` to one container's children."""
    container = find_component(tree, container_id)
    if container is None or not container.is_container:
        return tree

    children = move_within_siblings(container.children, from_index, to_index)
    if children is container.children:
        return tree
    return replace_component(
        tree, container_id, [container.model_copy(update={"children": children})]
    )


# =============================================================================
# Cloning
# =============================================================================


def clone_component(component: FormComponent) -> FormComponent:
    """
    Deep-clone a component with fresh identifiers.

    The component, every descendant and every option entry get new ids;
    generated field ids are regenerated and labels get a " (Copy)" suffix.
    """
    update: dict[str, Any] = {
        "id": generate_component_id(),
        "label": f"{component.label} (Copy)",
    }
    if component.field_id is not None:
        update["field_id"] = generate_component_id("field")
    if component.options:
        update["options"] = [
            option.model_copy(update={"id": generate_component_id("opt")})
            for option in component.options
        ]
    if component.children is not None:
        update["children"] = [clone_component(child) for child in component.children]

    return component.model_copy(update=update, deep=True)


# =============================================================================
# Invariants
# =============================================================================


def validate_tree(tree: FormTree, row_capacity: int | None = None) -> list[str]:
    """
    List structural invariant violations (empty when the tree is valid).

    Checks unique ids, row capacity, degenerate rows, rows nested beneath
    rows, children on leaves, and cycles.
    """
    capacity = row_capacity or get_settings().row_capacity
    violations: list[str] = []
    seen: set[str] = set()

    def _walk(components: list[FormComponent], path: list[FormComponent]) -> None:
        for component in components:
            if any(component is ancestor for ancestor in path):
                violations.append(f"cycle: '{component.id}' contains itself")
                continue
            if component.id in seen:
                violations.append(f"duplicate id '{component.id}'")
            seen.add(component.id)

            if component.type == ComponentType.ROW:
                count = len(component.children or [])
                if count > capacity:
                    violations.append(
                        f"row '{component.id}' holds {count} children (max {capacity})"
                    )
                if count <= 1:
                    violations.append(f"row '{component.id}' holds {count} children (min 2)")
                if any(a.type == ComponentType.ROW for a in path):
                    violations.append(f"row '{component.id}' is nested inside another row")
            elif component.type not in CONTAINER_TYPES and component.children is not None:
                violations.append(f"leaf '{component.id}' has children")

            if component.children:
                _walk(component.children, path + [component])

    _walk(tree, [])
    return violations


def assert_tree_invariants(tree: FormTree, row_capacity: int | None = None) -> None:
    """Raise TreeInvariantError if the tree breaks any structural invariant."""
    violations = validate_tree(tree, row_capacity)
    if violations:
        raise TreeInvariantError(violations)
