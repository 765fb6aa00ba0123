"""Tests for the catalog arena and the flattened runnable listing."""

import pytest

from clinav.catalog.builder import Catalog, build_tree, flatten
from clinav.catalog.types import ParameterDefinition, StaticCommand
from clinav.errors import StructuralError


class TestBuildTree:
    """Test mirroring definition trees into the arena."""

    def test_root_is_index_zero(self, sample_catalog):
        """The root definition always lands at arena index 0."""
        assert sample_catalog.root.index == Catalog.ROOT
        assert sample_catalog.root.name == "app"
        assert sample_catalog.root.is_root
        assert sample_catalog.root.parent is None

    def test_nodes_in_depth_first_order(self, sample_catalog):
        """Nodes are stored in depth-first pre-order."""
        assert [node.name for node in sample_catalog] == ["app", "a", "b", "c", "d"]
        assert len(sample_catalog) == 5

    def test_parent_and_children_are_indexes(self, sample_catalog):
        """Nodes refer to each other only by index."""
        group = sample_catalog.find(["b"])
        assert group.children == (3, 4)
        assert [child.name for child in sample_catalog.children(group.index)] == ["c", "d"]
        assert sample_catalog.node(3).parent == group.index

    def test_ids_and_depths(self, sample_catalog):
        """Ids are space-joined paths below the root; depth counts levels."""
        leaf = sample_catalog.find(["b", "d"])
        assert leaf.id == "b d"
        assert leaf.depth == 2
        assert sample_catalog.root.id == "app"

    def test_runnable_count(self, sample_catalog):
        """Only runnable nodes are counted."""
        assert sample_catalog.runnable_count == 3

    def test_ancestors_start_at_node(self, sample_catalog):
        """The scope chain runs from the node up to the root."""
        leaf = sample_catalog.find(["b", "c"])
        assert [node.name for node in sample_catalog.ancestors(leaf.index)] == ["c", "b", "app"]

    def test_paths(self, sample_catalog):
        """path_names omits the root, full_path includes it."""
        leaf = sample_catalog.find(["b", "c"])
        assert sample_catalog.path_names(leaf.index) == ("b", "c")
        assert sample_catalog.full_path(leaf.index) == "app b c"
        assert sample_catalog.full_path(Catalog.ROOT) == "app"

    def test_find_missing_returns_none(self, sample_catalog):
        """Unknown names resolve to None; the empty path is the root."""
        assert sample_catalog.find(["b", "x"]) is None
        assert sample_catalog.find([]) is sample_catalog.root

    def test_build_does_not_modify_definition(self, sample_tree):
        """Building twice from one definition gives equal catalogs."""
        first = build_tree(sample_tree)
        second = build_tree(sample_tree)
        assert list(first) == list(second)
        assert [child.name for child in sample_tree.children] == ["a", "b"]

    def test_empty_catalog_rejected(self):
        """A catalog cannot be created without nodes."""
        with pytest.raises(StructuralError):
            Catalog([])


class TestStructuralErrors:
    """Test rejection of malformed definition trees."""

    def test_cycle_detected(self):
        """A definition reachable from itself is rejected."""
        group = StaticCommand("loop")
        group.children.append(group)
        root = StaticCommand("app", children=[group])

        with pytest.raises(StructuralError) as exc_info:
            build_tree(root)

        assert "app -> loop -> loop" in str(exc_info.value)

    def test_shared_subtree_is_not_a_cycle(self):
        """The same definition under two different parents is allowed."""
        shared = StaticCommand("shared", runnable=True)
        root = StaticCommand(
            "app",
            children=[StaticCommand("x", children=[shared]), StaticCommand("y", children=[shared])],
        )

        catalog = build_tree(root)

        assert catalog.find(["x", "shared"]) is not None
        assert catalog.find(["y", "shared"]) is not None
        assert catalog.find(["x", "shared"]).index != catalog.find(["y", "shared"]).index

    def test_empty_name_rejected(self):
        """A blank command name is a structural error."""
        root = StaticCommand("app", children=[StaticCommand("  ", runnable=True)])

        with pytest.raises(StructuralError, match="empty name"):
            build_tree(root)

    def test_duplicate_siblings_rejected(self):
        """Two children with the same name cannot be told apart."""
        root = StaticCommand("app", children=[StaticCommand("a"), StaticCommand("a")])

        with pytest.raises(StructuralError, match="two children named 'a'"):
            build_tree(root)

    def test_duplicate_parameter_rejected(self):
        """A scope may declare a parameter name only once."""
        root = StaticCommand(
            "app",
            runnable=True,
            parameters=[ParameterDefinition("name"), ParameterDefinition("name")],
        )

        with pytest.raises(StructuralError, match="declares parameter 'name' twice"):
            build_tree(root)


class TestFlatten:
    """Test the flattened listing of runnable nodes."""

    def test_depth_first_order(self, sample_catalog):
        """Runnable nodes appear in pre-order with their display paths."""
        entries = flatten(sample_catalog)
        assert [entry.display_path for entry in entries] == ["a", "b c", "b d"]
        assert [entry.id for entry in entries] == ["a", "b c", "b d"]

    def test_entries_carry_index_and_description(self, sample_catalog):
        """Each entry points back at its arena node."""
        entry = flatten(sample_catalog)[1]
        assert sample_catalog.node(entry.index).name == "c"
        assert entry.short_description == "Leaf C"

    def test_non_runnable_groups_skipped(self, sample_catalog):
        """A group that cannot run by itself is not listed."""
        assert "b" not in [entry.display_path for entry in flatten(sample_catalog)]

    def test_runnable_group_included_before_children(self):
        """A runnable node with children is listed, followed by its children."""
        root = StaticCommand(
            "app",
            children=[StaticCommand("logs", runnable=True, children=[StaticCommand("tail", runnable=True)])],
        )

        paths = [entry.display_path for entry in flatten(build_tree(root))]

        assert paths == ["logs", "logs tail"]

    def test_runnable_root_shown_by_name(self):
        """A runnable root is listed under its own name."""
        root = StaticCommand("tool", runnable=True, children=[StaticCommand("sub", runnable=True)])

        entries = flatten(build_tree(root))

        assert [entry.display_path for entry in entries] == ["tool", "sub"]
        assert entries[0].index == Catalog.ROOT

    def test_nothing_runnable(self):
        """A tree without runnable nodes flattens to an empty list."""
        root = StaticCommand("app", children=[StaticCommand("group", children=[StaticCommand("empty")])])
        assert flatten(build_tree(root)) == []
