"""
Drop Zone Classification

Maps a pointer sample over a target rectangle to a drop position:

    +------+---------------------+------+
    |      |       before        |      |   top 30%
    |      +---------------------+      |
    | left |  center (after, or  | right|
    |      |  blocked for rows)  |      |
    |      +---------------------+      |
    |      |        after        |      |   bottom 30%
    +------+---------------------+------+
      20%                          20%

Horizontal zones win over vertical ones, so corners resolve to left/right.
Everything here is pure geometry with no UI dependency.
"""

import logging
from dataclasses import dataclass

from formcanvas.config import get_settings
from formcanvas.models.contracts.components import FormComponent
from formcanvas.models.contracts.drag_drop import DropIntent, Point, Rect
from formcanvas.models.enums import ComponentType, DropPosition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DropZoneConfig:
    """Edge sizes as fractions of the target's width/height."""

    horizontal_edge: float = 0.2
    vertical_edge: float = 0.3
    center_blocked_for_rows: bool = True

    @classmethod
    def from_settings(cls) -> "DropZoneConfig":
        settings = get_settings()
        return cls(
            horizontal_edge=settings.horizontal_edge,
            vertical_edge=settings.vertical_edge,
        )


def classify_drop(
    pointer: Point,
    rect: Rect,
    target: FormComponent,
    config: DropZoneConfig | None = None,
) -> DropPosition | None:
    """
    Classify a pointer position over a target.

    Args:
        pointer: Pointer sample, same coordinate space as ``rect``
        rect: Target bounding rectangle
        target: Component under the pointer
        config: Zone sizes (defaults to settings)

    Returns:
        LEFT/RIGHT/BEFORE/AFTER, or None when the pointer is outside the
        target or over the blocked center of a row
    """
    config = config or DropZoneConfig.from_settings()

    if rect.width <= 0 or rect.height <= 0:
        return None

    x_pct = (pointer.x - rect.left) / rect.width
    y_pct = (pointer.y - rect.top) / rect.height

    if not (0.0 <= x_pct <= 1.0) or not (0.0 <= y_pct <= 1.0):
        return None

    if x_pct < config.horizontal_edge:
        return DropPosition.LEFT
    if x_pct > 1.0 - config.horizontal_edge:
        return DropPosition.RIGHT

    if y_pct < config.vertical_edge:
        return DropPosition.BEFORE
    if y_pct > 1.0 - config.vertical_edge:
        return DropPosition.AFTER

    # Center: rows force the user to aim at an edge
    if target.type == ComponentType.ROW and config.center_blocked_for_rows:
        return None
    return DropPosition.AFTER


def build_drop_intent(
    pointer: Point,
    rect: Rect,
    target: FormComponent,
    config: DropZoneConfig | None = None,
) -> DropIntent | None:
    """Classify and wrap the result with its target id and pointer sample."""
    position = classify_drop(pointer, rect, target, config)
    if position is None:
        return None
    logger.debug(f"Drop zone over '{target.id}': {position.value} at ({pointer.x}, {pointer.y})")
    return DropIntent(position=position, target_id=target.id, pointer=pointer)
