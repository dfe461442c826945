"""
Core Exceptions

Custom exceptions for the form canvas engine.

Expected failures (unknown ids, full rows, malformed documents) are reported
as result values. These exceptions cover programming errors and the internal
plumbing of the document service.
"""

from formcanvas.models.enums import ImportErrorKind


class FormCanvasError(Exception):
    """Base class for engine errors."""

    def __init__(self, message: str = "Form canvas error"):
        self.message = message
        super().__init__(self.message)


class TreeInvariantError(FormCanvasError):
    """
    Raised when a committed tree breaks a structural invariant.

    Reaching this means the engine itself produced an impossible state
    (duplicate ids, an overfull row, a nested row). It is never raised for
    user input.

    Usage:
        assert_tree_invariants(tree)
        # Raises TreeInvariantError listing every violation
    """

    def __init__(self, violations: list[str]):
        self.violations = violations
        super().__init__("Tree invariant violated: " + "; ".join(violations))


class DocumentImportError(FormCanvasError):
    """
    Raised inside the document service when an import payload is unusable.

    The service converts it into an ImportResult before returning, so callers
    never see it.
    """

    def __init__(self, kind: ImportErrorKind, message: str):
        self.kind = kind
        super().__init__(message)
