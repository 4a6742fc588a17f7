"""Unit tests for the mutation engine."""

import math

import pytest
from structlog.testing import CapturingLogger

from pagesmith import mutations
from pagesmith.catalog import create_block
from pagesmith.models.node import ContainerNode, LeafNode, Page
from pagesmith.mutations import (
    delete_node,
    duplicate_node,
    insert_node,
    move_node,
    patch_props,
    resize_node,
    shift_node,
)
from pagesmith.tree import collect_ids, find_by_id, find_duplicate_ids, iter_nodes


def leaf(node_id, type="paragraph", **props):
    return LeafNode(id=node_id, type=type, props=props)


def ids(page):
    return [node.id for node in page]


def child_ids(page, container_id):
    return [child.id for child in find_by_id(page, container_id).node.children]


class TestInsertNode:
    """Tests for insert_node."""

    @pytest.mark.parametrize("index", [0, 1, 2, 3, 4])
    def test_insert_at_index(self, abcd_page, index):
        """Test the new node lands at index and others keep their order."""
        node = leaf("N")
        result = insert_node(abcd_page, index, node)

        assert len(result) == 5
        assert result[index] == node
        assert [i for i in ids(result) if i != "N"] == ["A", "B", "C", "D"]

    def test_index_is_clamped(self, abcd_page):
        """Test out-of-range indexes clamp to the ends."""
        assert ids(insert_node(abcd_page, 99, leaf("N")))[-1] == "N"
        assert ids(insert_node(abcd_page, -5, leaf("N")))[0] == "N"

    def test_insert_into_empty_page(self):
        """Test inserting into an empty page."""
        result = insert_node(Page.empty(), 0, leaf("N"))
        assert ids(result) == ["N"]

    def test_input_page_is_not_modified(self, abcd_page):
        """Test the original page is left untouched."""
        insert_node(abcd_page, 0, leaf("N"))
        assert ids(abcd_page) == ["A", "B", "C", "D"]

    def test_untouched_nodes_are_shared(self, nested_page):
        """Test unchanged siblings are the same objects in the new page."""
        result = insert_node(nested_page, 0, leaf("N"))
        assert result[1] is nested_page[0]
        assert result[2] is nested_page[1]

    def test_insert_into_container_appends(self, nested_page):
        """Test dropping into a section always appends, ignoring index."""
        result = insert_node(nested_page, 0, leaf("N"), parent_id="S")

        assert child_ids(result, "S") == ["X", "Y", "N"]
        assert ids(result) == ids(nested_page)

    def test_insert_into_two_column(self, nested_page):
        """Test two-column containers accept a third child."""
        result = insert_node(nested_page, 0, leaf("N"), parent_id="T")
        assert child_ids(result, "T") == ["L", "R", "N"]

    def test_missing_parent_is_noop(self, nested_page):
        """Test an unknown parent id leaves the page unchanged."""
        assert insert_node(nested_page, 0, leaf("N"), parent_id="nope") is nested_page

    def test_leaf_parent_is_noop(self, nested_page):
        """Test a non-container parent is rejected."""
        assert insert_node(nested_page, 0, leaf("N"), parent_id="H") is nested_page

    def test_nested_parent_is_noop(self, nested_page):
        """Test children cannot receive children."""
        assert insert_node(nested_page, 0, leaf("N"), parent_id="X") is nested_page

    def test_container_into_container_is_noop(self, nested_page):
        """Test a section cannot be dropped into a section."""
        section = create_block("section")
        assert insert_node(nested_page, 0, section, parent_id="S") is nested_page

    def test_existing_id_is_noop(self, nested_page):
        """Test inserting a node whose id is already used is rejected."""
        assert insert_node(nested_page, 0, leaf("X")) is nested_page

    def test_catalog_nodes_keep_ids_unique(self):
        """Test many inserts of catalog nodes never repeat an id."""
        page = Page.empty()
        for block_type in ["section", "two-column", "heading", "schedule"] * 5:
            page = insert_node(page, len(page), create_block(block_type))

        assert find_duplicate_ids(page) == []
        assert len(collect_ids(page)) == sum(1 for _ in iter_nodes(page))


class TestMoveNode:
    """Tests for move_node."""

    def test_move_forward_corrects_index(self, abcd_page):
        """Test moving A to drop index 3 lands between C and D."""
        result = move_node(abcd_page, "A", 3)
        assert ids(result) == ["B", "C", "A", "D"]

    def test_move_to_end(self, abcd_page):
        """Test drop index len(page) moves to the end."""
        assert ids(move_node(abcd_page, "A", 4)) == ["B", "C", "D", "A"]

    def test_move_backward_uses_index_as_is(self, abcd_page):
        """Test moving D to drop index 1 lands between A and B."""
        assert ids(move_node(abcd_page, "D", 1)) == ["A", "D", "B", "C"]

    def test_move_to_own_slot_is_noop(self, abcd_page):
        """Test dropping right before or after itself changes nothing."""
        assert move_node(abcd_page, "B", 1) is abcd_page
        assert move_node(abcd_page, "B", 2) is abcd_page

    def test_move_index_is_clamped(self, abcd_page):
        """Test out-of-range drop indexes clamp."""
        assert ids(move_node(abcd_page, "B", 50)) == ["A", "C", "D", "B"]
        assert ids(move_node(abcd_page, "C", -3)) == ["C", "A", "B", "D"]

    @pytest.mark.parametrize("start", range(4))
    @pytest.mark.parametrize("drop", range(5))
    def test_move_round_trip_restores_order(self, abcd_page, start, drop):
        """Test moving a node away and back restores the original order."""
        node_id = "ABCD"[start]
        moved = move_node(abcd_page, node_id, drop)
        position = ids(moved).index(node_id)

        # Drop index that puts the node back at ``start``
        back = start + 1 if start > position else start
        restored = move_node(moved, node_id, back)

        assert ids(restored) == ["A", "B", "C", "D"]

    def test_move_unknown_node_is_noop(self, abcd_page):
        """Test an unknown id leaves the page unchanged."""
        result = move_node(abcd_page, "Z", 0)
        assert result is abcd_page
        assert result == abcd_page

    def test_nested_node_is_not_movable(self, nested_page):
        """Test only top-level nodes move."""
        assert move_node(nested_page, "X", 0) is nested_page

    def test_move_into_container_appends(self, nested_page):
        """Test moving a top-level node into a section appends it."""
        result = move_node(nested_page, "H", 0, parent_id="S")

        assert ids(result) == ["S", "T"]
        assert child_ids(result, "S") == ["X", "Y", "H"]

    def test_move_into_container_keeps_node_value(self, nested_page):
        """Test the moved node keeps its id and props."""
        result = move_node(nested_page, "H", 0, parent_id="T")
        moved = find_by_id(result, "H")

        assert moved.parent.id == "T"
        assert moved.node == nested_page[0]

    def test_move_container_into_container_is_noop(self, nested_page):
        """Test a container cannot be nested."""
        assert move_node(nested_page, "T", 0, parent_id="S") is nested_page

    def test_move_into_itself_is_noop(self, nested_page):
        """Test a node cannot become its own child."""
        assert move_node(nested_page, "S", 0, parent_id="S") is nested_page

    def test_move_into_missing_parent_is_noop(self, nested_page):
        """Test an unknown parent leaves the page unchanged."""
        assert move_node(nested_page, "H", 0, parent_id="nope") is nested_page

    def test_move_into_leaf_is_noop(self, nested_page):
        """Test a leaf cannot become a parent."""
        page = insert_node(nested_page, 0, leaf("P"))
        assert move_node(page, "P", 0, parent_id="H") is page


class TestDuplicateNode:
    """Tests for duplicate_node."""

    def test_copy_follows_original(self, abcd_page):
        """Test the copy is inserted right after the original."""
        result = duplicate_node(abcd_page, "B")
        copy_id = ids(result)[2]

        assert ids(result)[:2] == ["A", "B"]
        assert ids(result)[3:] == ["C", "D"]
        assert copy_id not in {"A", "B", "C", "D"}
        assert result[2].props == result[1].props
        assert result[2].type == result[1].type

    def test_duplicate_container_renews_child_ids(self, nested_page):
        """Test children of a duplicated container get fresh ids too."""
        result = duplicate_node(nested_page, "S")
        clone = result[2]

        assert isinstance(clone, ContainerNode)
        assert [c.props for c in clone.children] == [c.props for c in nested_page[1].children]
        assert not {c.id for c in clone.children} & {"X", "Y"}
        assert find_duplicate_ids(result) == []

    def test_duplicate_nested_child(self, nested_page):
        """Test duplicating a child inserts the copy inside the same container."""
        result = duplicate_node(nested_page, "X")
        children = child_ids(result, "S")

        assert len(children) == 3
        assert children[0] == "X" and children[2] == "Y"
        assert ids(result) == ids(nested_page)

    def test_repeated_duplication_never_collides(self, abcd_page):
        """Test duplicating the same node and its copies keeps ids unique."""
        page = abcd_page
        for _ in range(5):
            page = duplicate_node(page, "A")
        for _ in range(3):
            page = duplicate_node(page, ids(page)[1])

        assert len(page) == 12
        assert find_duplicate_ids(page) == []

    def test_copy_props_are_independent(self, nested_page):
        """Test mutating the copy's props never reaches the source."""
        page = patch_props(nested_page, "X", {"items": [{"time": "09:00"}]})
        result = duplicate_node(page, "S")
        source = result[1]
        clone = result[2]

        clone.children[0].props["items"][0]["time"] = "23:59"
        clone.props["paddingY"] = "py-20"

        assert source.children[0].props["items"][0]["time"] == "09:00"
        assert source.props["paddingY"] == "py-12"

    def test_source_props_mutation_does_not_reach_copy(self, abcd_page):
        """Test independence holds the other way round."""
        page = patch_props(abcd_page, "A", {"tags": ["x"]})
        result = duplicate_node(page, "A")

        result[0].props["tags"].append("y")

        assert result[1].props["tags"] == ["x"]

    def test_duplicate_unknown_is_noop(self, abcd_page):
        """Test an unknown id leaves the page unchanged."""
        assert duplicate_node(abcd_page, "Z") is abcd_page


class TestDeleteNode:
    """Tests for delete_node."""

    def test_delete_top_level(self, abcd_page):
        """Test deleting a top-level node."""
        assert ids(delete_node(abcd_page, "C")) == ["A", "B", "D"]

    def test_delete_container_removes_children(self, nested_page):
        """Test a deleted container takes its children with it."""
        result = delete_node(nested_page, "S")
        assert collect_ids(result) == {"H", "T", "L", "R"}

    def test_nested_child_needs_flag(self, nested_page):
        """Test children are only deletable with nested=True."""
        assert delete_node(nested_page, "X") is nested_page

        result = delete_node(nested_page, "X", nested=True)
        assert child_ids(result, "S") == ["Y"]

    def test_nested_child_without_flag_is_logged(self, nested_page, monkeypatch):
        """Test the ignored delete names the nesting, not a missing node."""
        recorder = CapturingLogger()
        monkeypatch.setattr(mutations, "logger", recorder)

        delete_node(nested_page, "X")
        delete_node(nested_page, "Z")

        reasons = [call.kwargs["reason"] for call in recorder.calls]
        assert reasons == ["nested_node", "node_not_found"]
        assert recorder.calls[0].kwargs["parent_id"] == "S"

    def test_delete_unknown_is_noop(self, abcd_page):
        """Test an unknown id returns an equal page."""
        result = delete_node(abcd_page, "Z")
        assert result is abcd_page
        assert result == abcd_page


class TestPatchProps:
    """Tests for patch_props."""

    def test_patch_is_shallow_overlay(self):
        """Test patched keys replace values and the rest survive."""
        page = Page((leaf("H", "heading", text="hi", color="#fff", fontSize=32),))
        result = patch_props(page, "H", {"color": "#000"})

        assert result[0].props == {"text": "hi", "color": "#000", "fontSize": 32}
        assert page[0].props == {"text": "hi", "color": "#fff", "fontSize": 32}

    def test_record_props_are_replaced_not_merged(self):
        """Test a list-valued prop is replaced whole."""
        page = Page((create_block("schedule"),))
        node_id = page[0].id
        items = [{"time": "08:00", "title": "Breakfast", "location": "Cafe"}]

        result = patch_props(page, node_id, {"items": items})

        assert result[0].props["items"] == items
        assert len(page[0].props["items"]) == 3

    def test_patch_values_are_copied(self, abcd_page):
        """Test later changes to the caller's patch do not leak into the page."""
        items = [{"time": "09:00"}]
        result = patch_props(abcd_page, "A", {"items": items})

        items[0]["time"] = "10:00"

        assert result[0].props["items"] == [{"time": "09:00"}]

    def test_patch_nested_child(self, nested_page):
        """Test children are reachable by patch."""
        result = patch_props(nested_page, "R", {"text": "changed"})

        assert find_by_id(result, "R").node.props == {"text": "changed"}
        assert result[0] is nested_page[0]

    def test_patch_does_not_change_id_or_type(self, nested_page):
        """Test the patch only touches props."""
        result = patch_props(nested_page, "H", {"id": "other", "type": "image"})
        node = result[0]

        assert node.id == "H"
        assert node.type == "heading"
        assert node.props["id"] == "other"

    def test_patch_unknown_is_noop(self, nested_page):
        """Test an unknown id returns an equal page."""
        result = patch_props(nested_page, "Z", {"text": "x"})
        assert result is nested_page
        assert result == nested_page


class TestShiftAndResize:
    """Tests for shift_node and resize_node."""

    def test_shift_up_and_down(self, abcd_page):
        """Test swapping with the neighbour."""
        assert ids(shift_node(abcd_page, "C", -1)) == ["A", "C", "B", "D"]
        assert ids(shift_node(abcd_page, "C", 1)) == ["A", "B", "D", "C"]

    def test_shift_at_edges_is_noop(self, abcd_page):
        """Test the first node cannot go up and the last cannot go down."""
        assert shift_node(abcd_page, "A", -1) is abcd_page
        assert shift_node(abcd_page, "D", 1) is abcd_page

    def test_shift_nested_is_noop(self, nested_page):
        """Test only top-level nodes shift."""
        assert shift_node(nested_page, "Y", -1) is nested_page

    def test_resize_sets_custom_width(self, abcd_page):
        """Test resize patches width props."""
        result = resize_node(abcd_page, "A", 480.6)
        assert result[0].props["width"] == "custom"
        assert result[0].props["customWidth"] == 481

    def test_resize_has_minimum(self, abcd_page):
        """Test widths below 120px clamp to 120."""
        assert resize_node(abcd_page, "A", 10)[0].props["customWidth"] == 120

    @pytest.mark.parametrize("width", [math.nan, math.inf, -math.inf])
    def test_resize_non_finite_is_noop(self, abcd_page, width):
        """Test NaN and infinite widths are ignored."""
        assert resize_node(abcd_page, "A", width) is abcd_page

    def test_resize_nested_is_noop(self, nested_page):
        """Test only top-level nodes resize."""
        assert resize_node(nested_page, "X", 300) is nested_page


class TestSerializationAfterMutations:
    """Round trip of pages produced by the engine."""

    def test_round_trip_after_edits(self, nested_page):
        """Test serialize/deserialize after a mix of operations."""
        page = insert_node(nested_page, 1, create_block("two-column"))
        page = insert_node(page, 0, create_block("schedule"), parent_id="S")
        page = move_node(page, "H", 0, parent_id="T")
        page = duplicate_node(page, "S")
        page = patch_props(page, "X", {"text": "edited", "frame": True, "rotate": 12.5})
        page = delete_node(page, "R", nested=True)

        assert Page.from_json(page.to_json()) == page
