"""
Formcanvas CLI

Command-line interface for exported form documents.

Commands:
  formcanvas inspect <file>   - Print the page/component outline of a document
  formcanvas validate <file>  - Check that a document imports cleanly
"""

import logging
import sys
from pathlib import Path

from formcanvas.config import get_settings
from formcanvas.models.contracts.components import FormComponent
from formcanvas.models.contracts.export_import import ImportResult
from formcanvas.services.component_tree import count_components
from formcanvas.services.document_service import import_document

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load(path_arg: str) -> ImportResult | None:
    """Read and import a document file. Prints the reason and returns None on read errors."""
    path = Path(path_arg)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {path}: {e.strerror or e}", file=sys.stderr)
        return None
    return import_document(text)


def format_outline(component: FormComponent, depth: int = 0) -> list[str]:
    """Indented one-line-per-node outline of a component and its children."""
    label = f" {component.label!r}" if component.label else ""
    lines = [f"{'  ' * depth}- {component.type.value}{label} [{component.id}]"]
    for child in component.children or []:
        lines.extend(format_outline(child, depth + 1))
    return lines


def main(args: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if args is None:
        args = sys.argv[1:]

    if not args:
        print_help()
        return 0

    command = args[0].lower()

    if command in ("help", "-h", "--help"):
        print_help()
        return 0

    _configure_logging()

    if command == "inspect":
        return handle_inspect(args[1:])

    if command == "validate":
        return handle_validate(args[1:])

    print(f"Unknown command: {command}", file=sys.stderr)
    print_help()
    return 1


def print_help() -> None:
    """Print CLI help message."""
    print("""
Formcanvas CLI - Inspect and validate form documents

Usage:
  formcanvas <command> [options]

Commands:
  inspect     Print the page and component outline of a document
  validate    Check that a document imports cleanly (exit code 0/1)
  help        Show this help message

Examples:
  formcanvas inspect my_form.json
  formcanvas validate my_form.json
""".strip())


def handle_inspect(args: list[str]) -> int:
    """
    Handle 'formcanvas inspect' command.

    Args:
        args: Document path

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not args or args[0] in ("--help", "-h"):
        print("Usage: formcanvas inspect <file>")
        return 0 if args else 1

    result = _load(args[0])
    if result is None:
        return 1
    if not result.success:
        print(f"Invalid document ({result.error_kind.value}): {result.error}", file=sys.stderr)
        return 1

    state = result.state
    print(f"{state.template_name}")
    for page in state.pages:
        print(f"Page {page.title!r} [{page.id}] - {count_components(page.components)} component(s)")
        for component in page.components:
            for line in format_outline(component, 1):
                print(line)
    return 0


def handle_validate(args: list[str]) -> int:
    """
    Handle 'formcanvas validate' command.

    Args:
        args: Document path

    Returns:
        Exit code (0 when the document imports cleanly, 1 otherwise)
    """
    if not args or args[0] in ("--help", "-h"):
        print("Usage: formcanvas validate <file>")
        return 0 if args else 1

    result = _load(args[0])
    if result is None:
        return 1
    if not result.success:
        print(f"Invalid ({result.error_kind.value}): {result.error}", file=sys.stderr)
        return 1

    pages = result.state.pages
    total = sum(count_components(page.components) for page in pages)
    print(f"OK: {len(pages)} page(s), {total} component(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
