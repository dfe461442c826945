# tests/unit/services/test_component_tree.py
"""Unit tests for the pure component tree operations."""

import pytest
from pydantic import ValidationError

from formcanvas.core.exceptions import TreeInvariantError
from formcanvas.models.contracts.components import SelectOption
from formcanvas.models.enums import ComponentType
from formcanvas.services.component_factory import create_component
from formcanvas.services.component_tree import (
    assert_tree_invariants,
    clone_component,
    collect_ids,
    count_components,
    find_component,
    find_parent,
    insert_at,
    locate_component,
    move_within_container,
    move_within_siblings,
    remove_component,
    update_component,
    validate_tree,
)
from tests.helpers.tree_builders import column, ids, leaf, row


class TestSearch:
    """find/locate/iterate over nested trees."""

    def test_find_nested(self, nested_tree):
        found = find_component(nested_tree, "c")
        assert found is not None
        assert found.label == "C"

    def test_find_missing(self, nested_tree):
        assert find_component(nested_tree, "nope") is None

    def test_locate_reports_parent_and_ancestors(self, nested_tree):
        location = locate_component(nested_tree, "c")
        assert location.index == 1
        assert location.parent_id == "r1"
        assert [a.id for a in location.ancestors] == ["col1", "r1"]
        assert location.in_row
        assert location.under_row

    def test_locate_root_component(self, nested_tree):
        location = locate_component(nested_tree, "d")
        assert location.parent is None
        assert location.index == 1
        assert not location.in_row
        assert location.siblings == []

    def test_find_parent(self, nested_tree):
        assert find_parent(nested_tree, "r1").id == "col1"
        assert find_parent(nested_tree, "col1") is None

    def test_collect_and_count(self, nested_tree):
        assert collect_ids(nested_tree) == {"col1", "a", "r1", "b", "c", "d"}
        assert collect_ids(nested_tree[0].children[1]) == {"r1", "b", "c"}
        assert count_components(nested_tree) == 6

    def test_cyclic_tree_terminates(self):
        """A row that contains itself must not hang the search."""
        looped = row("r", leaf("a"), leaf("b"))
        looped.children.append(looped)

        assert find_component([looped], "missing") is None
        assert find_component([looped], "b").id == "b"
        assert count_components([looped]) == 3
        assert locate_component([looped], "missing") is None


class TestUpdateComponent:
    def test_updates_label_without_touching_input(self, flat_tree):
        updated = update_component(flat_tree, "b", {"label": "Renamed"})

        assert find_component(updated, "b").label == "Renamed"
        assert flat_tree[1].label == "B"
        # Untouched siblings are shared
        assert updated[0] is flat_tree[0]

    def test_accepts_camel_case_keys(self, flat_tree):
        updated = update_component(flat_tree, "a", {"helpText": "Shown below", "required": True})
        component = find_component(updated, "a")
        assert component.help_text == "Shown below"
        assert component.required is True

    def test_nested_update_keeps_children(self, nested_tree):
        updated = update_component(nested_tree, "r1", {"label": "Contact"})
        target = find_component(updated, "r1")
        assert target.label == "Contact"
        assert ids(target.children) == ["b", "c"]

    def test_unknown_id_returns_same_tree(self, flat_tree):
        assert update_component(flat_tree, "missing", {"label": "x"}) is flat_tree

    def test_protected_fields_ignored(self, flat_tree):
        assert update_component(flat_tree, "a", {"id": "hijack"}) is flat_tree
        updated = update_component(flat_tree, "a", {"id": "hijack", "label": "Kept"})
        assert find_component(updated, "a").label == "Kept"
        assert find_component(updated, "hijack") is None

    def test_type_change_within_leaves(self, flat_tree):
        updated = update_component(flat_tree, "a", {"type": "email_input"})
        assert find_component(updated, "a").type == ComponentType.EMAIL_INPUT

    def test_type_change_across_container_boundary_ignored(self, flat_tree):
        assert update_component(flat_tree, "a", {"type": "row"}) is flat_tree

    @pytest.mark.parametrize(
        "tree",
        [
            [column("col1", leaf("a"))],
            [column("col1", row("r1", leaf("b"), leaf("c")), leaf("d"))],
            [column("col1", *[leaf(f"n{i}") for i in range(5)])],
        ],
    )
    def test_column_never_becomes_row(self, tree):
        assert update_component(tree, "col1", {"type": "row"}) is tree
        assert validate_tree(tree) == []

    def test_row_never_becomes_column(self, row_tree):
        assert update_component(row_tree, "r1", {"type": "column"}) is row_tree

    def test_retyping_keeps_other_fields_of_patch(self, nested_tree):
        updated = update_component(nested_tree, "col1", {"type": "row", "label": "Group"})
        target = find_component(updated, "col1")
        assert target.type == ComponentType.COLUMN
        assert target.label == "Group"

    def test_patch_with_current_values_returns_same_tree(self, flat_tree):
        assert update_component(flat_tree, "a", {"label": "A", "required": False}) is flat_tree
        assert update_component(flat_tree, "a", {"type": "text_input"}) is flat_tree

    def test_invalid_value_raises(self, flat_tree):
        with pytest.raises(ValidationError):
            update_component(flat_tree, "a", {"level": 12})


class TestRemoveComponent:
    def test_remove_root(self, flat_tree):
        assert ids(remove_component(flat_tree, "b")) == ["a", "c"]
        assert ids(flat_tree) == ["a", "b", "c"]

    def test_remove_nested_shares_other_subtrees(self, nested_tree):
        updated = remove_component(nested_tree, "a")
        assert ids(updated[0].children) == ["r1"]
        assert updated[1] is nested_tree[1]
        assert updated[0].children[0] is nested_tree[0].children[1]

    def test_remove_from_row_dissolves(self, nested_tree):
        updated = remove_component(nested_tree, "b")
        assert ids(updated[0].children) == ["a", "c"]

    def test_unknown_id_returns_same_tree(self, nested_tree):
        assert remove_component(nested_tree, "missing") is nested_tree


class TestInsertAt:
    def test_insert_root(self, flat_tree):
        updated = insert_at(flat_tree, None, 1, leaf("n"))
        assert ids(updated) == ["a", "n", "b", "c"]

    def test_append_when_index_none(self, flat_tree):
        assert ids(insert_at(flat_tree, None, None, leaf("n"))) == ["a", "b", "c", "n"]

    @pytest.mark.parametrize("index,expected", [(-5, ["n", "a", "b", "c"]), (99, ["a", "b", "c", "n"])])
    def test_index_clamped(self, flat_tree, index, expected):
        assert ids(insert_at(flat_tree, None, index, leaf("n"))) == expected

    def test_insert_into_container(self, nested_tree):
        updated = insert_at(nested_tree, "col1", 0, leaf("n"))
        assert ids(updated[0].children) == ["n", "a", "r1"]
        assert ids(nested_tree[0].children) == ["a", "r1"]

    def test_leaf_or_unknown_parent_is_noop(self, nested_tree):
        assert insert_at(nested_tree, "d", 0, leaf("n")) is nested_tree
        assert insert_at(nested_tree, "missing", 0, leaf("n")) is nested_tree


class TestReordering:
    def test_move_within_siblings(self, flat_tree):
        assert ids(move_within_siblings(flat_tree, 0, 2)) == ["b", "c", "a"]
        assert ids(move_within_siblings(flat_tree, 2, 0)) == ["c", "a", "b"]

    @pytest.mark.parametrize("from_index,to_index", [(1, 1), (-1, 0), (0, 3), (5, 0)])
    def test_noop_moves_return_same_list(self, flat_tree, from_index, to_index):
        assert move_within_siblings(flat_tree, from_index, to_index) is flat_tree

    def test_move_within_container(self, nested_tree):
        updated = move_within_container(nested_tree, "r1", 0, 1)
        assert ids(find_component(updated, "r1").children) == ["c", "b"]

    def test_move_within_leaf_is_noop(self, nested_tree):
        assert move_within_container(nested_tree, "d", 0, 1) is nested_tree


class TestCloneComponent:
    def test_fresh_ids_throughout(self, nested_tree):
        original = nested_tree[0]
        clone = clone_component(original)

        assert collect_ids(clone).isdisjoint(collect_ids(original))
        assert count_components([clone]) == count_components([original])
        assert [c.type for c in clone.children] == [c.type for c in original.children]

    def test_labels_suffixed(self):
        clone = clone_component(row("r", leaf("a"), leaf("b")))
        assert clone.label == "Row Layout (Copy)"
        assert [c.label for c in clone.children] == ["A (Copy)", "B (Copy)"]

    def test_options_and_field_id_regenerated(self):
        original = create_component("select")
        clone = clone_component(original)

        assert clone.field_id != original.field_id
        assert [o.label for o in clone.options] == [o.label for o in original.options]
        assert {o.id for o in clone.options}.isdisjoint({o.id for o in original.options})

    def test_original_untouched(self):
        original = leaf("a", ComponentType.RADIO_GROUP)
        original.options = [SelectOption(id="o1", label="One", value="1")]
        clone_component(original)
        assert original.id == "a"
        assert original.options[0].id == "o1"


class TestValidateTree:
    def test_valid_tree(self, nested_tree, row_tree):
        assert validate_tree(nested_tree) == []
        assert validate_tree(row_tree) == []

    def test_duplicate_ids(self):
        violations = validate_tree([leaf("a"), column("col", leaf("a"))])
        assert any("duplicate id 'a'" in v for v in violations)

    def test_overfull_row(self):
        overfull = row("r", *(leaf(f"n{i}") for i in range(5)))
        assert any("max 4" in v for v in validate_tree([overfull]))
        assert validate_tree([overfull], row_capacity=5) == []

    def test_degenerate_row(self):
        assert any("min 2" in v for v in validate_tree([row("r", leaf("a"))]))

    def test_nested_row(self):
        nested = row("outer", leaf("a"), column("col", row("inner", leaf("b"), leaf("c"))))
        assert any("nested" in v for v in validate_tree([nested]))

    def test_cycle_reported(self):
        looped = column("col", leaf("a"))
        looped.children.append(looped)
        assert any("cycle" in v for v in validate_tree([looped]))

    def test_assert_raises_with_violations(self):
        with pytest.raises(TreeInvariantError) as exc_info:
            assert_tree_invariants([row("r", leaf("a"))])
        assert exc_info.value.violations
        assert "min 2" in str(exc_info.value)
