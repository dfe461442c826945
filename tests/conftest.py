"""
Pytest fixtures for the formcanvas engine.

This module provides:
1. Settings isolation (the cached settings are rebuilt for every test)
2. Common component trees
3. Editing session fixtures
"""

import pytest

from formcanvas.config import get_settings
from formcanvas.models.contracts.components import FormComponent
from formcanvas.models.contracts.drag_drop import Rect
from formcanvas.services.form_builder_service import FormBuilderService
from tests.helpers.tree_builders import column, leaf, row


# ==================== CONFIGURATION ====================


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment overrides apply per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ==================== TREES ====================


@pytest.fixture
def flat_tree() -> list[FormComponent]:
    """[A, B, C] at the root."""
    return [leaf("a"), leaf("b"), leaf("c")]


@pytest.fixture
def row_tree() -> list[FormComponent]:
    """[row{P, Q}, C]"""
    return [row("r1", leaf("p"), leaf("q")), leaf("c")]


@pytest.fixture
def full_row_tree() -> list[FormComponent]:
    """[row{X, Y, Z, W}] - a row at capacity."""
    return [row("r1", leaf("x"), leaf("y"), leaf("z"), leaf("w"))]


@pytest.fixture
def nested_tree() -> list[FormComponent]:
    """[col{A, row{B, C}}, D]"""
    return [column("col1", leaf("a"), row("r1", leaf("b"), leaf("c"))), leaf("d")]


@pytest.fixture
def square() -> Rect:
    return Rect(left=0, top=0, width=100, height=100)


# ==================== SESSIONS ====================


@pytest.fixture
def service() -> FormBuilderService:
    return FormBuilderService()
