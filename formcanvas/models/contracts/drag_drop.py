"""
Drag and drop contract models.

Geometry inputs for the drop-zone classifier, the drag payload union consumed
from the UI layer, and the result returned by the smart insert engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import Field

from formcanvas.models.contracts.components import CamelModel, FormComponent
from formcanvas.models.enums import DropPosition, RejectionReason


# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------


class Point(CamelModel):
    """Pointer sample in the same coordinate space as the target rect."""

    x: float
    y: float


class Rect(CamelModel):
    """Bounding rectangle of a drop target."""

    left: float
    top: float
    width: float
    height: float


class DropIntent(CamelModel):
    """Classified placement directive for one target."""

    position: DropPosition = Field(description="Where the payload should go")
    target_id: str | None = Field(
        default=None, description="Component the position was computed against"
    )
    pointer: Point | None = Field(
        default=None, description="Pointer sample that produced the intent"
    )


# -----------------------------------------------------------------------------
# Drag Payloads
# -----------------------------------------------------------------------------


class NewItemPayload(CamelModel):
    """Palette drag: the engine creates a fresh component."""

    kind: Literal["newItem"] = "newItem"
    component_type: str = Field(description="Requested component type")


class ExistingItemPayload(CamelModel):
    """Canvas drag: an existing component is relocated."""

    kind: Literal["existingItem"] = "existingItem"
    source_id: str = Field(description="Id of the component being moved")
    node: FormComponent = Field(description="Component data as seen by the UI")
    origin_container_id: str | None = Field(
        default=None, description="Container the drag started from, if any"
    )


DragPayload = Annotated[
    Union[NewItemPayload, ExistingItemPayload],
    Field(discriminator="kind"),
]


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


@dataclass
class DropResult:
    """
    Outcome of a smart drop.

    On rejection ``tree`` is the very list passed in and selected_id is None;
    a no-op drop also hands back the input list.
    """

    tree: list[FormComponent]
    selected_id: str | None = None
    rejected: RejectionReason | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.rejected is None
