"""
Editor action contract models.

Every change an editing session can make is one of these actions. They form a
closed union discriminated by ``action``, so a serialized action such as
``{"action": "delete_component", "componentId": "comp_abc"}`` validates straight
into the right model via ``EditorActionAdapter``.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter

from formcanvas.models.contracts.components import CamelModel
from formcanvas.models.contracts.drag_drop import DragPayload, DropIntent
from formcanvas.models.enums import DropPosition


# -----------------------------------------------------------------------------
# Component Actions
# -----------------------------------------------------------------------------


class AddComponentAction(CamelModel):
    """Add a new palette component, at the root unless a target is given."""

    action: Literal["add_component"] = "add_component"
    component_type: str = Field(description="Palette type, e.g. 'text_input'")
    target_id: str | None = Field(default=None, description="Component to place relative to")
    position: DropPosition = Field(default=DropPosition.NONE)


class UpdateComponentAction(CamelModel):
    action: Literal["update_component"] = "update_component"
    component_id: str
    patch: dict[str, Any] = Field(default_factory=dict, description="Fields to merge")


class DeleteComponentAction(CamelModel):
    action: Literal["delete_component"] = "delete_component"
    component_id: str


class DuplicateComponentAction(CamelModel):
    """Clone a component (fresh ids) and insert the clone right after it."""

    action: Literal["duplicate_component"] = "duplicate_component"
    component_id: str


class MoveComponentAction(CamelModel):
    """Reorder within the root list (container_id None) or one container."""

    action: Literal["move_component"] = "move_component"
    from_index: int
    to_index: int
    container_id: str | None = None


class DropComponentAction(CamelModel):
    """Commit a drag gesture through the smart insert engine."""

    action: Literal["drop_component"] = "drop_component"
    payload: DragPayload
    intent: DropIntent | None = None
    target_id: str | None = None


class SelectComponentAction(CamelModel):
    action: Literal["select_component"] = "select_component"
    component_id: str | None = None


# -----------------------------------------------------------------------------
# Page Actions
# -----------------------------------------------------------------------------


class AddPageAction(CamelModel):
    action: Literal["add_page"] = "add_page"
    title: str | None = Field(default=None, description="Defaults to 'Page <n>'")


class DeletePageAction(CamelModel):
    action: Literal["delete_page"] = "delete_page"
    page_id: str


class RenamePageAction(CamelModel):
    action: Literal["rename_page"] = "rename_page"
    page_id: str
    title: str


class SwitchPageAction(CamelModel):
    action: Literal["switch_page"] = "switch_page"
    page_id: str


class ReorderPagesAction(CamelModel):
    action: Literal["reorder_pages"] = "reorder_pages"
    from_index: int
    to_index: int


class ClearPageAction(CamelModel):
    """Remove every component from a page (the current page by default)."""

    action: Literal["clear_page"] = "clear_page"
    page_id: str | None = None


# -----------------------------------------------------------------------------
# Form Actions
# -----------------------------------------------------------------------------


class SetTemplateNameAction(CamelModel):
    action: Literal["set_template_name"] = "set_template_name"
    name: str


class ClearAllAction(CamelModel):
    """Reset the form to a single empty page."""

    action: Literal["clear_all"] = "clear_all"


EditorAction = Annotated[
    Union[
        AddComponentAction,
        UpdateComponentAction,
        DeleteComponentAction,
        DuplicateComponentAction,
        MoveComponentAction,
        DropComponentAction,
        SelectComponentAction,
        AddPageAction,
        DeletePageAction,
        RenamePageAction,
        SwitchPageAction,
        ReorderPagesAction,
        ClearPageAction,
        SetTemplateNameAction,
        ClearAllAction,
    ],
    Field(discriminator="action"),
]

EditorActionAdapter: TypeAdapter[EditorAction] = TypeAdapter(EditorAction)
