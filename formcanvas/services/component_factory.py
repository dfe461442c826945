"""
Component Factory

Creates new components with per-type defaults:
- Labels and placeholders for every palette type
- Validation presets (email pattern) and default options for selections
- Empty children lists for layout containers
"""

import logging
import random
import string

from formcanvas.config import get_settings
from formcanvas.models.contracts.components import FieldValidation, FormComponent, SelectOption
from formcanvas.models.enums import LEGACY_TYPE_ALIASES, ComponentType

logger = logging.getLogger(__name__)


DEFAULT_COMPONENT_LABELS: dict[ComponentType, str] = {
    ComponentType.TEXT_INPUT: "Text Input",
    ComponentType.EMAIL_INPUT: "Email Address",
    ComponentType.NUMBER_INPUT: "Number",
    ComponentType.PASSWORD_INPUT: "Password",
    ComponentType.TEXTAREA: "Text Area",
    ComponentType.RICH_TEXT: "Rich Text Editor",
    ComponentType.DATE_PICKER: "Date",
    ComponentType.FILE_UPLOAD: "File Upload",
    ComponentType.SIGNATURE: "Digital Signature",
    ComponentType.SELECT: "Select",
    ComponentType.MULTI_SELECT: "Multi-Select",
    ComponentType.RADIO_GROUP: "Radio Group",
    ComponentType.CHECKBOX: "Checkbox",
    ComponentType.BUTTON: "Button",
    ComponentType.HEADING: "Heading",
    ComponentType.PARAGRAPH: "Paragraph",
    ComponentType.DIVIDER: "Divider",
    ComponentType.SECTION_DIVIDER: "Section Divider",
    ComponentType.ROW: "Row Layout",
    ComponentType.COLUMN: "Column Layout",
}

DEFAULT_PLACEHOLDERS: dict[ComponentType, str] = {
    ComponentType.TEXT_INPUT: "Enter text here...",
    ComponentType.EMAIL_INPUT: "Enter email address...",
    ComponentType.NUMBER_INPUT: "Enter number...",
    ComponentType.PASSWORD_INPUT: "Enter password...",
    ComponentType.TEXTAREA: "Enter text here...",
    ComponentType.RICH_TEXT: "Enter rich text content...",
    ComponentType.DATE_PICKER: "Select date...",
    ComponentType.SELECT: "Choose an option...",
    ComponentType.MULTI_SELECT: "Choose options...",
}

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_component_id(prefix: str = "comp") -> str:
    """Generate a short random identifier such as ``comp_k3x9a0qz1``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}_{suffix}"


def resolve_component_type(component_type: str | ComponentType | None) -> ComponentType:
    """
    Map a requested type onto a known ComponentType.

    Unknown or empty types fall back to the configured default type instead of
    failing the whole operation.
    """
    if isinstance(component_type, ComponentType):
        return component_type
    if component_type in LEGACY_TYPE_ALIASES:
        return ComponentType(LEGACY_TYPE_ALIASES[component_type])
    try:
        return ComponentType(component_type)
    except ValueError:
        fallback = ComponentType(get_settings().default_component_type)
        logger.warning(
            f"Invalid component type: {component_type!r}. Using {fallback.value} as fallback."
        )
        return fallback


def _default_options(count: int) -> list[SelectOption]:
    return [
        SelectOption(
            id=generate_component_id("opt"),
            label=f"Option {n}",
            value=f"option{n}",
        )
        for n in range(1, count + 1)
    ]


def create_component(component_type: str | ComponentType | None) -> FormComponent:
    """Create a new component of the given type with smart defaults."""
    ctype = resolve_component_type(component_type)

    fields: dict = {
        "id": generate_component_id(),
        "type": ctype,
        "label": DEFAULT_COMPONENT_LABELS[ctype],
        "required": False,
    }
    if ctype in DEFAULT_PLACEHOLDERS:
        fields["placeholder"] = DEFAULT_PLACEHOLDERS[ctype]

    if ctype in (ComponentType.ROW, ComponentType.COLUMN):
        fields["children"] = []
    elif ctype in (ComponentType.HEADING, ComponentType.PARAGRAPH, ComponentType.DIVIDER,
                   ComponentType.SECTION_DIVIDER, ComponentType.BUTTON):
        # Display-only components do not collect data
        pass
    else:
        fields["field_id"] = generate_component_id("field")
        fields["validation"] = FieldValidation(required=False)

    # Type-specific defaults
    if ctype == ComponentType.EMAIL_INPUT:
        fields["validation"] = FieldValidation(
            required=False,
            pattern=EMAIL_PATTERN,
            message="Please enter a valid email address",
        )
    elif ctype == ComponentType.NUMBER_INPUT:
        fields["step"] = 1
    elif ctype == ComponentType.TEXTAREA:
        fields["rows"] = 4
    elif ctype in (ComponentType.SELECT, ComponentType.MULTI_SELECT):
        fields["options"] = _default_options(3)
        if ctype == ComponentType.MULTI_SELECT:
            fields["multiple"] = True
    elif ctype == ComponentType.RADIO_GROUP:
        fields["options"] = _default_options(2)
    elif ctype == ComponentType.FILE_UPLOAD:
        fields["accept"] = "*/*"
        fields["multiple"] = False
    elif ctype == ComponentType.BUTTON:
        fields["variant"] = "primary"
        fields["size"] = "md"
    elif ctype == ComponentType.HEADING:
        fields["level"] = 2
        fields["content"] = "Heading Text"
    elif ctype == ComponentType.PARAGRAPH:
        fields["content"] = "Paragraph text goes here..."
    elif ctype == ComponentType.SECTION_DIVIDER:
        fields["content"] = "Section Title"

    return FormComponent(**fields)
