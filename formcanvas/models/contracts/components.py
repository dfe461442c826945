"""
Form Component Definitions

Core types for the recursive form tree.

This module is the single source of truth for:
- The component node (FormComponent) and its variant payload
- Supporting types (SelectOption, FieldValidation)
- Pages (FormPage), which own one root component list each

JSON keys are camelCase ("fieldId", "helpText"); Python attributes are
snake_case. Either form is accepted on input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from formcanvas.models.enums import CONTAINER_TYPES, ComponentType


# -----------------------------------------------------------------------------
# Shared Configuration
# -----------------------------------------------------------------------------


class CamelModel(BaseModel):
    """Base model serializing to camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Shared Supporting Types
# -----------------------------------------------------------------------------


class SelectOption(CamelModel):
    """Option entry for select, multi-select and radio components."""

    id: str | None = Field(default=None, description="Option identifier")
    label: str = Field(description="Option display label")
    value: str = Field(description="Option value")


class FieldValidation(CamelModel):
    """Validation rule attached to an input component."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    required: bool = Field(default=False, description="Value is mandatory")
    pattern: str | None = Field(default=None, description="Regex the value must match")
    message: str | None = Field(default=None, description="Message shown on failure")
    min: float | None = Field(default=None, description="Minimum numeric value")
    max: float | None = Field(default=None, description="Maximum numeric value")
    min_length: int | None = Field(default=None, description="Minimum text length")
    max_length: int | None = Field(default=None, description="Maximum text length")


# -----------------------------------------------------------------------------
# Component Node
# -----------------------------------------------------------------------------


class FormComponent(CamelModel):
    """
    A node of the form tree.

    Leaf types (inputs, selections, content) never carry children. Container
    types (row, column) always carry an ordered children list, possibly empty.
    Keys the engine does not know about (style, layout, className, ...) are
    kept as extra data and travel with the node through moves and clones.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str = Field(description="Unique component identifier")
    type: ComponentType = Field(description="Component type")
    label: str = Field(default="", description="Display label")
    required: bool = Field(default=False, description="Whether the field is mandatory")
    field_id: str | None = Field(
        default=None, description="Generated identifier used for submitted data"
    )
    placeholder: str | None = Field(default=None, description="Input placeholder")
    help_text: str | None = Field(default=None, description="Help text under the input")
    default_value: Any | None = Field(default=None, description="Initial value")
    options: list[SelectOption] | None = Field(
        default=None, description="Options for select/radio components"
    )
    validation: FieldValidation | None = Field(
        default=None, description="Validation rule"
    )
    content: str | None = Field(
        default=None, description="Static text for heading/paragraph components"
    )
    level: int | None = Field(default=None, ge=1, le=6, description="Heading level")
    rows: int | None = Field(default=None, description="Visible rows for text areas")
    step: float | None = Field(default=None, description="Step for number inputs")
    accept: str | None = Field(default=None, description="Accepted MIME types for uploads")
    multiple: bool | None = Field(default=None, description="Allow multiple files/values")
    variant: str | None = Field(default=None, description="Button variant")
    size: str | None = Field(default=None, description="Button size")
    children: list[FormComponent] | None = Field(
        default=None, description="Child components (containers only)"
    )

    @model_validator(mode="after")
    def validate_children(self) -> FormComponent:
        """Containers always have a children list; leaves never do."""
        if self.type in CONTAINER_TYPES:
            if self.children is None:
                self.children = []
        elif self.children is not None:
            raise ValueError(f"{self.type.value} components cannot have children")
        return self

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    @property
    def is_row(self) -> bool:
        return self.type == ComponentType.ROW


# -----------------------------------------------------------------------------
# Pages
# -----------------------------------------------------------------------------


class FormPage(CamelModel):
    """One page of a multi-page form."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str = Field(description="Page identifier")
    title: str = Field(default="Untitled Page", description="Page title")
    components: list[FormComponent] = Field(
        default_factory=list, description="Root component list of the page"
    )
    description: str | None = Field(default=None, description="Page description")


FormComponent.model_rebuild()
FormPage.model_rebuild()
