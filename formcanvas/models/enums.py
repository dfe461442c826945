"""
Enumeration types used across the engine.
"""

from enum import Enum


class ComponentType(str, Enum):
    """Form component types"""
    # Inputs
    TEXT_INPUT = "text_input"
    EMAIL_INPUT = "email_input"
    NUMBER_INPUT = "number_input"
    PASSWORD_INPUT = "password_input"
    TEXTAREA = "textarea"
    RICH_TEXT = "rich_text"
    DATE_PICKER = "date_picker"
    FILE_UPLOAD = "file_upload"
    SIGNATURE = "signature"
    # Selection
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    RADIO_GROUP = "radio_group"
    CHECKBOX = "checkbox"
    # Content
    BUTTON = "button"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    DIVIDER = "divider"
    SECTION_DIVIDER = "section_divider"
    # Layout containers
    ROW = "row"
    COLUMN = "column"


# Container types hold an ordered children list
CONTAINER_TYPES = frozenset([ComponentType.ROW, ComponentType.COLUMN])

# Legacy type names still found in older exported documents
LEGACY_TYPE_ALIASES = {
    "horizontal_layout": ComponentType.ROW.value,
    "vertical_layout": ComponentType.COLUMN.value,
}


class DropPosition(str, Enum):
    """Placement directive derived from the pointer position over a target"""
    BEFORE = "before"
    AFTER = "after"
    LEFT = "left"
    RIGHT = "right"
    INSIDE = "inside"
    NONE = "none"


class RejectionReason(str, Enum):
    """Why a drop or editor action was refused (the tree is left unchanged)"""
    ROW_AT_CAPACITY = "row is at capacity"
    ROW_HORIZONTAL = "rows reposition vertically only"
    CIRCULAR_PLACEMENT = "circular placement"
    ROW_NESTING = "rows cannot be nested"
    TARGET_NOT_CONTAINER = "target cannot hold children"
    SOURCE_NOT_FOUND = "dragged component not found"
    ROW_NEEDS_PAIR = "rows are created by placing components side by side"
    LAST_PAGE = "at least one page is required"
    INVALID_PATCH = "patch has invalid values"


class ImportErrorKind(str, Enum):
    """Distinguishable failure kinds for document import"""
    INVALID_JSON = "invalid_json"
    MISSING_PAGES = "missing_pages"
    INVALID_COMPONENTS = "invalid_components"
    INVALID_STRUCTURE = "invalid_structure"
