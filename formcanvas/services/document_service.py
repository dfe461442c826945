"""
Document Service

Serializes editor state to the JSON document format and back.

Export writes camelCase keys with two-space indentation and drops unset
fields. Import is forgiving about shape and strict about structure:
- legacy ``{"components": [...]}`` payloads become a single page
- legacy type names are mapped and unknown leaf types fall back to the
  default type
- missing page ids/titles and component ids are synthesized
- degenerate rows are dissolved
- duplicate ids, overfull rows, nested rows and components nested past
  ``max_nesting_depth`` are refused

Import never raises for bad input; every failure comes back as an
ImportResult with a distinguishable error kind.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from formcanvas.config import get_settings
from formcanvas.core.exceptions import DocumentImportError
from formcanvas.models.contracts.components import FormComponent, FormPage
from formcanvas.models.contracts.editor import EditorState
from formcanvas.models.contracts.export_import import FormDocument, ImportResult
from formcanvas.models.enums import (
    CONTAINER_TYPES,
    LEGACY_TYPE_ALIASES,
    ComponentType,
    ImportErrorKind,
)
from formcanvas.services.component_factory import generate_component_id
from formcanvas.services.component_tree import validate_tree
from formcanvas.services.row_layout import normalize_rows

logger = logging.getLogger(__name__)

IMPORTED_TEMPLATE_NAME = "Imported Form"
UNTITLED_PAGE_TITLE = "Untitled Page"


# =============================================================================
# Export
# =============================================================================


def export_document(state: EditorState) -> str:
    """Serialize the template name and pages of ``state`` to indented JSON."""
    document = FormDocument(
        template_name=state.template_name,
        pages=state.pages,
        version=get_settings().document_version,
    )
    return document.model_dump_json(by_alias=True, exclude_none=True, indent=2)


# =============================================================================
# Import
# =============================================================================


def _normalize_type(raw_type: Any, component_id: str) -> str:
    settings = get_settings()
    if not isinstance(raw_type, str):
        logger.warning(f"Component '{component_id}' has no type, using {settings.default_component_type}")
        return settings.default_component_type

    if raw_type in LEGACY_TYPE_ALIASES:
        return LEGACY_TYPE_ALIASES[raw_type]

    try:
        return ComponentType(raw_type).value
    except ValueError:
        logger.warning(
            f"Unknown component type {raw_type!r} on '{component_id}', "
            f"using {settings.default_component_type}"
        )
        return settings.default_component_type


def _normalize_component(raw: Any, path: str, depth: int = 1) -> dict[str, Any]:
    """Copy a raw component dict with its id, type and children normalized."""
    if not isinstance(raw, dict):
        raise DocumentImportError(
            ImportErrorKind.INVALID_COMPONENTS, f"Component at {path} is not an object"
        )

    max_depth = get_settings().max_nesting_depth
    if depth > max_depth:
        raise DocumentImportError(
            ImportErrorKind.INVALID_STRUCTURE,
            f"Component at {path} is nested deeper than {max_depth} levels",
        )

    data = dict(raw)
    if not isinstance(data.get("id"), str) or not data["id"]:
        data["id"] = generate_component_id()
    data["type"] = _normalize_type(data.get("type"), data["id"])

    children = data.get("children")
    if children == [] and ComponentType(data["type"]) not in CONTAINER_TYPES:
        # Older documents carry empty children arrays on leaves
        data.pop("children")
    elif children is not None:
        if not isinstance(children, list):
            raise DocumentImportError(
                ImportErrorKind.INVALID_COMPONENTS,
                f"Children of '{data['id']}' must be an array",
            )
        data["children"] = [
            _normalize_component(child, f"{path}.children[{index}]", depth + 1)
            for index, child in enumerate(children)
        ]
    return data


def _parse_page(raw: Any, index: int) -> FormPage:
    if not isinstance(raw, dict):
        raise DocumentImportError(
            ImportErrorKind.INVALID_STRUCTURE, f"Page {index + 1} is not an object"
        )

    components = raw.get("components", [])
    if components is None:
        components = []
    if not isinstance(components, list):
        raise DocumentImportError(
            ImportErrorKind.INVALID_COMPONENTS,
            f"Components of page {index + 1} must be an array",
        )

    data = dict(raw)
    data["id"] = raw.get("id") or f"page-{generate_component_id('import')}"
    data["title"] = raw.get("title") or UNTITLED_PAGE_TITLE
    data["components"] = [
        _normalize_component(component, f"pages[{index}].components[{position}]")
        for position, component in enumerate(components)
    ]

    try:
        page = FormPage.model_validate(data)
    except ValidationError as e:
        raise DocumentImportError(
            ImportErrorKind.INVALID_COMPONENTS,
            f"Page {index + 1} has invalid components: {e.error_count()} error(s)",
        ) from e

    tree = normalize_rows(page.components)
    if tree is not page.components:
        page = page.model_copy(update={"components": tree})
    return page


def _check_structure(pages: list[FormPage]) -> None:
    page_ids = [page.id for page in pages]
    if len(set(page_ids)) != len(page_ids):
        raise DocumentImportError(ImportErrorKind.INVALID_STRUCTURE, "Duplicate page ids")

    # Component ids must be unique across the whole document
    all_components: list[FormComponent] = [c for page in pages for c in page.components]
    violations = validate_tree(all_components, get_settings().row_capacity)
    if violations:
        raise DocumentImportError(ImportErrorKind.INVALID_STRUCTURE, "; ".join(violations))


def _parse_document(text: str) -> EditorState:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise DocumentImportError(ImportErrorKind.INVALID_JSON, f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise DocumentImportError(
            ImportErrorKind.INVALID_JSON, "Invalid JSON: nested too deeply to decode"
        ) from e

    if not isinstance(data, dict):
        raise DocumentImportError(
            ImportErrorKind.INVALID_STRUCTURE, "Document must be a JSON object"
        )

    raw_pages = data.get("pages")
    if raw_pages is None and isinstance(data.get("components"), list):
        logger.info("Importing legacy single-page document")
        raw_pages = [{"id": "page-1", "title": "Page 1", "components": data["components"]}]

    if not isinstance(raw_pages, list):
        raise DocumentImportError(
            ImportErrorKind.MISSING_PAGES, "Invalid template format: missing pages array"
        )

    try:
        pages = [_parse_page(raw, index) for index, raw in enumerate(raw_pages)]
        if not pages:
            pages = [FormPage(id="page-1", title="Page 1", components=[])]
        _check_structure(pages)
    except RecursionError as e:
        raise DocumentImportError(
            ImportErrorKind.INVALID_STRUCTURE, "Components are nested too deeply"
        ) from e

    template_name = data.get("templateName")
    return EditorState(
        template_name=template_name if isinstance(template_name, str) and template_name
        else IMPORTED_TEMPLATE_NAME,
        pages=pages,
        current_page_id=pages[0].id,
        selected_id=None,
    )


def import_document(text: str) -> ImportResult:
    """
    Parse a serialized document into a fresh editor state.

    Args:
        text: JSON document text (multi-page or legacy single-page)

    Returns:
        ImportResult with the new state on success, or the error kind and
        message on failure
    """
    try:
        state = _parse_document(text)
    except DocumentImportError as e:
        logger.warning(f"Import failed ({e.kind.value}): {e.message}")
        return ImportResult(success=False, error_kind=e.kind, error=e.message)

    count = sum(len(page.components) for page in state.pages)
    logger.info(f"Imported '{state.template_name}': {len(state.pages)} page(s), {count} root component(s)")
    return ImportResult(success=True, state=state)
