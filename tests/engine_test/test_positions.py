# tests/engine_test/test_positions.py
"""
Tests for the hierarchy position translator (graph_undo_redo/positions.py).
"""
import pytest

from graph_api.models.node import Node
from graph_api.types import Position
from graph_undo_redo.positions import get_top_most_nodes, move_nodes


@pytest.fixture
def deep_graph(graph):
    """Stub graph with one more level under C1."""
    graph.add([Node("C1a", parent="C1", position=(1, 1)),
               Node("C1b", parent="C1", position=(3, 3))])
    return graph


class TestTopMostNodes:

    def test_descendants_dropped(self, deep_graph):
        top = get_top_most_nodes(deep_graph, ["C1a", "A", "B", "C1"])
        assert [n.node_id for n in top] == ["A", "B"]

    def test_siblings_kept(self, deep_graph):
        top = get_top_most_nodes(deep_graph, ["C1a", "C1b"])
        assert [n.node_id for n in top] == ["C1a", "C1b"]

    def test_edges_ignored(self, graph):
        assert [n.node_id for n in get_top_most_nodes(graph, ["e1", "D"])] == ["D"]


class TestMoveNodes:

    def test_leaf(self, graph):
        move_nodes(graph, Position(5, -5), ["D"])
        assert graph.get_position("D") == Position(55, 45)

    def test_compound_moves_every_leaf_descendant(self, deep_graph):
        before_a = deep_graph.get_position("A")
        move_nodes(deep_graph, (10, 10), ["A"])
        assert deep_graph.get_position("C1a") == Position(11, 11)
        assert deep_graph.get_position("C1b") == Position(13, 13)
        assert deep_graph.get_position("C2") == Position(30, 20)
        assert deep_graph.get_position("A") == before_a + Position(10, 10)

    def test_overlapping_set_moved_once(self, deep_graph):
        move_nodes(deep_graph, {'x': 2, 'y': 0}, ["A", "C1", "C1a"])
        assert deep_graph.get_position("C1a") == Position(3, 1)

    def test_without_top_most_filter(self, deep_graph):
        move_nodes(deep_graph, (2, 0), ["C1", "C1a"], top_most_only=False)
        assert deep_graph.get_position("C1a") == Position(5, 1)

    def test_other_nodes_untouched(self, graph, snapshot):
        before = snapshot(graph)['nodes']
        move_nodes(graph, (1, 1), ["P"])
        after = snapshot(graph)['nodes']
        changed = {k for k in before if before[k] != after[k]}
        assert changed == {"P", "p1"}

    def test_bad_delta(self, graph):
        with pytest.raises(ValueError):
            move_nodes(graph, "far", ["D"])
