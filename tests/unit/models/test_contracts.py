"""
Contract tests for the engine models
Tests Pydantic validation rules and camelCase serialization
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from formcanvas.models.contracts.actions import (
    DropComponentAction,
    EditorActionAdapter,
    MoveComponentAction,
)
from formcanvas.models.contracts.components import FormComponent, FormPage
from formcanvas.models.contracts.drag_drop import (
    DragPayload,
    DropResult,
    ExistingItemPayload,
    NewItemPayload,
)
from formcanvas.models.contracts.editor import EditorState, HistoryState
from formcanvas.models.enums import ComponentType, DropPosition, RejectionReason


class TestFormComponent:
    """Test validation for FormComponent"""

    def test_container_gets_empty_children(self):
        component = FormComponent(id="r", type="row")
        assert component.children == []
        assert component.is_container and component.is_row

    def test_leaf_with_children_rejected(self):
        with pytest.raises(ValidationError):
            FormComponent(id="a", type="text_input", children=[])

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            FormComponent(id="a", type="hologram")

    def test_camel_case_input_and_output(self):
        component = FormComponent.model_validate(
            {"id": "a", "type": "text_input", "fieldId": "field_1", "helpText": "Hint"}
        )
        assert component.field_id == "field_1"
        dumped = component.model_dump(by_alias=True, exclude_none=True)
        assert dumped["fieldId"] == "field_1"
        assert dumped["helpText"] == "Hint"

    def test_heading_level_bounds(self):
        with pytest.raises(ValidationError):
            FormComponent(id="h", type="heading", level=7)

    def test_nested_children_validate(self):
        page = FormPage.model_validate({
            "id": "p",
            "components": [
                {"id": "r", "type": "row", "children": [
                    {"id": "a", "type": "text_input"},
                    {"id": "b", "type": "select", "options": [{"label": "One", "value": "1"}]},
                ]},
            ],
        })
        assert page.title == "Untitled Page"
        assert page.components[0].children[1].options[0].value == "1"


class TestDragPayload:
    """Test the drag payload union"""

    adapter = TypeAdapter(DragPayload)

    def test_new_item(self):
        payload = self.adapter.validate_python({"kind": "newItem", "componentType": "select"})
        assert isinstance(payload, NewItemPayload)
        assert payload.component_type == "select"

    def test_existing_item(self):
        payload = self.adapter.validate_python({
            "kind": "existingItem",
            "sourceId": "a",
            "node": {"id": "a", "type": "text_input"},
            "originContainerId": "r1",
        })
        assert isinstance(payload, ExistingItemPayload)
        assert payload.origin_container_id == "r1"

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "teleport"})


class TestEditorActions:
    """Test the editor action union"""

    def test_drop_action_from_json(self):
        action = EditorActionAdapter.validate_json(
            '{"action": "drop_component",'
            ' "payload": {"kind": "newItem", "componentType": "text_input"},'
            ' "intent": {"position": "right", "targetId": "a", "pointer": {"x": 95, "y": 10}}}'
        )
        assert isinstance(action, DropComponentAction)
        assert action.intent.position == DropPosition.RIGHT
        assert action.intent.pointer.x == 95

    def test_move_action_requires_indexes(self):
        with pytest.raises(ValidationError):
            EditorActionAdapter.validate_python({"action": "move_component", "fromIndex": 1})
        action = EditorActionAdapter.validate_python(
            {"action": "move_component", "fromIndex": 1, "toIndex": 0}
        )
        assert isinstance(action, MoveComponentAction)

    def test_unknown_action_rejected(self):
        with pytest.raises(ValidationError):
            EditorActionAdapter.validate_python({"action": "explode"})


class TestResultsAndState:
    def test_drop_result_ok(self):
        assert DropResult(tree=[]).ok
        rejected = DropResult(tree=[], rejected=RejectionReason.ROW_AT_CAPACITY)
        assert not rejected.ok

    def test_current_page_falls_back_to_first(self):
        state = EditorState(
            pages=[FormPage(id="p1", components=[FormComponent(id="a", type=ComponentType.DIVIDER)])],
            current_page_id="missing",
        )
        assert state.current_page.id == "p1"
        assert state.components[0].id == "a"
        assert EditorState().components == []

    def test_history_state_is_frozen(self):
        history = HistoryState()
        with pytest.raises(ValidationError):
            history.cursor = 3
