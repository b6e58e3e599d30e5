# tests/engine_test/test_drag_adapter.py
"""
Tests for the pointer drag adapter (graph_undo_redo/drag_adapter.py).

The host is simulated by firing ``grab``, moving nodes directly and
firing ``free``, the way an interactive view would.
"""
import pytest

from graph_api.types import Position
from graph_undo_redo.exceptions import UnknownActionError


def drag(graph, node_id, dx, dy, moved=None):
    """Simulate a pointer drag of ``node_id`` (and ``moved``) by (dx, dy)."""
    node = graph.get_node(node_id)
    graph.notify("grab", node=node)
    for other in moved or [node_id]:
        graph.set_position(other, graph.get_position(other) + Position(dx, dy))
    graph.notify("free", node=node)


class TestDragAdapter:

    def test_drag_becomes_one_undo_step(self, engine, graph):
        drag(graph, "B", 5, 3)
        assert graph.get_position("B") == Position(105, 103)
        stack = engine.get_undo_stack()
        assert [e.name for e in stack] == ["drag"]
        assert stack[0].args['position_diff'] == Position(5, 3)

        engine.undo()
        assert graph.get_position("B") == Position(100, 100)
        engine.redo()
        assert graph.get_position("B") == Position(105, 103)

    def test_zero_length_drag_ignored(self, engine, graph):
        drag(graph, "B", 0, 0)
        assert engine.is_undo_stack_empty()

    def test_selected_nodes_move_together(self, engine, graph):
        graph.select(["B", "D"])
        drag(graph, "B", 5, 5, moved=["B", "D"])
        recorded = engine.get_undo_stack()[0].args['nodes']
        assert set(recorded.ids()) == {"B", "D"}

        engine.undo()
        assert graph.get_position("B") == Position(100, 100)
        assert graph.get_position("D") == Position(50, 50)

    def test_unselected_grab_moves_only_that_node(self, engine, graph):
        graph.select(["D"])
        drag(graph, "B", 5, 5)
        assert engine.get_undo_stack()[0].args['nodes'].ids() == ["B"]

    def test_predicate_decides_per_node(self, manager, graph):
        engine = manager.undo_redo(graph, {'undoable_drag': lambda node: node.node_id != "D"})
        drag(graph, "D", 1, 1)
        assert engine.is_undo_stack_empty()
        drag(graph, "B", 1, 1)
        assert len(engine.get_undo_stack()) == 1

    def test_reinit_updates_undoable(self, manager, graph):
        engine = manager.undo_redo(graph)
        manager.undo_redo(graph, {'undoable_drag': lambda node: False})
        drag(graph, "B", 1, 1)
        assert engine.is_undo_stack_empty()

    def test_disable_drag_undo(self, engine, graph):
        adapter = engine.drag_adapter
        engine.disable_drag_undo()
        assert not adapter.attached
        drag(graph, "B", 1, 1)
        assert engine.is_undo_stack_empty()

    def test_free_without_grab_ignored(self, engine, graph):
        graph.notify("free", node=graph.get_node("B"))
        assert engine.is_undo_stack_empty()

    def test_drag_clears_redo_stack(self, engine, graph):
        engine.do("select", ["B"])
        engine.undo()
        drag(graph, "D", 2, 2)
        assert engine.is_redo_stack_empty()

    def test_missing_drag_action_is_fatal(self, engine, graph):
        engine.remove_action("drag")
        with pytest.raises(UnknownActionError, match="drag"):
            drag(graph, "B", 5, 3)
        # The failed drag leaves no half-recorded grab behind
        graph.notify("free", node=graph.get_node("B"))
        assert engine.is_undo_stack_empty()

    def test_failing_drag_action_propagates(self, engine, graph):
        def broken(args, first_time=False):
            raise RuntimeError("cannot record drag")

        engine.action("drag", broken, lambda args: args)
        with pytest.raises(RuntimeError, match="cannot record drag"):
            drag(graph, "B", 5, 3)
