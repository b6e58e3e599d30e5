# tests/engine_test/test_default_actions.py
"""
Tests for the built-in reversible actions (graph_undo_redo/actions/).

Every action is checked for:
    • do()   → the intended change
    • undo() → the exact prior state
    • redo() → the exact post-do state
"""
import pytest

from graph_api.models.node import Node
from graph_api.types import Position


# ═════════════════════════════════════════════════════════════════
#  HELPERS
# ═════════════════════════════════════════════════════════════════

def assert_round_trip(engine, graph, snapshot, name, args):
    """do → undo → redo, comparing snapshots at each step."""
    before = snapshot(graph)
    engine.do(name, args)
    after = snapshot(graph)
    assert after != before

    engine.undo()
    assert snapshot(graph) == before

    engine.redo()
    assert snapshot(graph) == after
    return after


# ═════════════════════════════════════════════════════════════════
#  INSERT / REMOVE / RESTORE
# ═════════════════════════════════════════════════════════════════

class TestElementActions:

    def test_add_creates_then_restores_same_object(self, engine, graph):
        engine.do("add", [{'group': 'nodes', 'id': 'Z', 'position': {'x': 1, 'y': 1}},
                          {'group': 'edges', 'id': 'ez', 'source': 'Z', 'target': 'B'}])
        z = graph.get_node("Z")
        assert graph.get_edge("ez").target_id == "B"

        engine.undo()
        assert not graph.has_id("Z")
        assert not graph.has_id("ez")

        engine.redo()
        assert graph.get_node("Z") is z

    def test_insert_is_alias_of_add(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "insert", [Node("Z", position=(3, 4))])

    def test_remove_round_trip(self, engine, graph, snapshot):
        c1 = graph.get_node("C1")
        assert_round_trip(engine, graph, snapshot, "remove", ["A"])
        assert not graph.has_id("C1")
        engine.undo()
        assert graph.get_node("C1") is c1

    def test_remove_returns_cascade(self, engine):
        removed = engine.do("remove", ["B"])
        assert set(removed.ids()) == {"B", "e1", "e2"}

    def test_restore_action(self, engine, graph, snapshot):
        removed = graph.remove(["D"])
        assert_round_trip(engine, graph, snapshot, "restore", removed)
        assert graph.has_id("D")


# ═════════════════════════════════════════════════════════════════
#  SELECTION
# ═════════════════════════════════════════════════════════════════

class TestSelectionActions:

    def test_select_round_trip(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "select", ["B", "e1"])
        assert graph.get_edge("e1").selected

    def test_undo_keeps_previously_selected(self, engine, graph):
        graph.select(["B"])
        changed = engine.do("select", ["B", "D"])
        assert changed.ids() == ["D"]

        engine.undo()
        assert graph.get_node("B").selected
        assert not graph.get_node("D").selected

    def test_unselect_round_trip(self, engine, graph, snapshot):
        graph.select(["B", "D"])
        assert_round_trip(engine, graph, snapshot, "unselect", ["D"])
        assert graph.get_node("B").selected


# ═════════════════════════════════════════════════════════════════
#  MOVE
# ═════════════════════════════════════════════════════════════════

class TestMoveAction:

    def test_reparent_nodes(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "move",
                          {'eles': ["D"], 'location': {'parent': "A"}})
        assert graph.parent("D").node_id == "A"

    def test_each_node_returns_to_its_own_parent(self, engine, graph, snapshot):
        before = snapshot(graph)
        engine.do("move", {'eles': ["C1", "D", "p1"], 'location': {'parent': None}})
        assert graph.parent("C1") is None

        engine.undo()
        assert snapshot(graph) == before
        assert graph.parent("C1").node_id == "A"
        assert graph.parent("p1").node_id == "P"
        assert graph.parent("D") is None

    def test_reconnect_edges(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "move",
                          {'eles': ["e2", "e3"], 'location': {'target': "C2"}})
        assert graph.get_edge("e3").target_id == "C2"

    def test_mixed_nodes_and_edges(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "move",
                          {'eles': ["D", "C1", "e2"],
                           'location': {'parent': "P", 'source': "p1"}})
        assert graph.parent("C1").node_id == "P"
        assert graph.get_edge("e2").source_id == "p1"

    def test_nodes_ignored_without_parent_key(self, engine, graph):
        record = engine.do("move", {'eles': ["D", "e2"], 'location': {'source': "C1"}})
        assert record['old_nodes_parents'] == {}
        assert graph.parent("D") is None

    def test_undo_result_describes_redo(self, engine):
        engine.do("move", {'eles': ["D"], 'location': {'parent': "A"}})
        redo_args = engine.undo()
        assert redo_args['eles'].ids() == ["D"]
        assert redo_args['location'] == {'parent': "A"}

    def test_replacing_document(self, replacing_engine, replacing_graph, snapshot):
        assert_round_trip(replacing_engine, replacing_graph, snapshot, "move",
                          {'eles': ["A", "e2"], 'location': {'parent': "P", 'target': "C2"}})


# ═════════════════════════════════════════════════════════════════
#  DRAG
# ═════════════════════════════════════════════════════════════════

class TestDragAction:

    def test_drag_with_move(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "drag",
                          {'position_diff': (5, 3), 'nodes': ["A", "B"], 'move': True})
        assert graph.get_position("C1") == Position(5, 3)
        assert graph.get_position("C2") == Position(25, 13)
        assert graph.get_position("B") == Position(105, 103)

    def test_nested_members_move_once(self, engine, graph):
        engine.do("drag", {'position_diff': Position(5, 3), 'nodes': ["A", "C1"], 'move': True})
        assert graph.get_position("C1") == Position(5, 3)
        engine.undo()
        assert graph.get_position("C1") == Position(0, 0)

    def test_recorded_drag_is_not_reapplied(self, engine, graph):
        # A pointer drag has already moved the node
        graph.set_position("D", (55, 53))
        engine.do("drag", {'position_diff': {'x': 5, 'y': 3}, 'nodes': ["D"], 'move': False})
        assert graph.get_position("D") == Position(55, 53)

        engine.undo()
        assert graph.get_position("D") == Position(50, 50)
        engine.redo()
        assert graph.get_position("D") == Position(55, 53)

    def test_drag_clears_selection(self, engine, graph):
        graph.select(["B", "e1"])
        engine.do("drag", {'position_diff': (1, 1), 'nodes': ["B"], 'move': True})
        assert graph.query(":selected").is_empty()


# ═════════════════════════════════════════════════════════════════
#  LAYOUT
# ═════════════════════════════════════════════════════════════════

class TestLayoutAction:

    def test_layout_round_trip(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "layout",
                          {'options': {'name': 'grid', 'spacing': 30}})

    def test_layout_subset(self, engine, graph):
        engine.do("layout", {'options': {'name': 'preset', 'positions': {'B': (0, 0)}},
                             'eles': ["B"]})
        assert graph.get_position("B") == Position(0, 0)
        assert graph.get_position("D") == Position(50, 50)
        engine.undo()
        assert graph.get_position("B") == Position(100, 100)

    def test_first_run_returns_prior_positions(self, engine):
        positions = engine.do("layout", {'options': {'name': 'circle'}})
        assert positions["B"] == Position(100, 100)
        assert positions["A"] == Position(10, 5)

    def test_nodes_added_later_stay_put(self, engine, graph):
        engine.do("layout", {'options': {'name': 'grid'}})
        graph.add(Node("late", position=(7, 7)))
        engine.undo()
        assert graph.get_position("late") == Position(7, 7)
        assert graph.get_position("B") == Position(100, 100)


# ═════════════════════════════════════════════════════════════════
#  CHANGE PARENT
# ═════════════════════════════════════════════════════════════════

class TestChangeParentFine:

    def test_round_trip(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "change_parent",
                          {'nodes': ["A"], 'parent_data': "P",
                           'pos_diff_x': 10, 'pos_diff_y': 20})
        assert graph.parent("A").node_id == "P"
        assert graph.get_position("C1") == Position(10, 20)
        assert graph.get_position("C2") == Position(30, 30)

    def test_identity_preserved(self, engine, graph):
        a = graph.get_node("A")
        engine.do("change_parent", {'nodes': ["A"], 'parent_data': "P"})
        engine.undo()
        assert graph.get_node("A") is a
        assert graph.parent("A") is None

    def test_move_to_top_level(self, engine, graph, snapshot):
        assert_round_trip(engine, graph, snapshot, "change_parent",
                          {'nodes': ["p1"], 'parent_data': None,
                           'pos_diff_x': -200, 'pos_diff_y': 0})
        assert graph.get_position("p1") == Position(0, 0)
        assert not graph.is_parent("P")

    def test_callback_receives_moved_elements(self, engine, graph):
        seen = []
        engine.do("change_parent", {'nodes': ["B"], 'parent_data': "A",
                                    'callback': lambda eles: seen.append(eles.ids())})
        engine.undo()
        engine.redo()
        assert seen == [["B"], ["B"], ["B"]]


class TestChangeParentCoarse:

    def test_round_trip(self, replacing_engine, replacing_graph, snapshot):
        assert_round_trip(replacing_engine, replacing_graph, snapshot, "change_parent",
                          {'nodes': ["A"], 'parent_data': "P",
                           'pos_diff_x': 10, 'pos_diff_y': 20})
        assert replacing_graph.parent("A").node_id == "P"
        assert replacing_graph.get_position("C2") == Position(30, 30)

    def test_undo_restores_original_objects(self, replacing_engine, replacing_graph):
        a = replacing_graph.get_node("A")
        e1 = replacing_graph.get_edge("e1")

        replacing_engine.do("change_parent", {'nodes': ["A"], 'parent_data': "P"})
        assert replacing_graph.get_node("A") is not a

        replacing_engine.undo()
        assert replacing_graph.get_node("A") is a
        assert replacing_graph.get_edge("e1") is e1

    def test_callback_receives_moved_elements(self, replacing_engine):
        seen = []
        replacing_engine.do("change_parent", {'nodes': ["D"], 'parent_data': "A",
                                              'callback': seen.append})
        assert set(seen[0].ids()) == {"D", "e2"}
        replacing_engine.undo()
        assert "D" in seen[1]

    def test_callback_sees_whole_recreated_subtree(self, replacing_engine, replacing_graph):
        seen = []
        replacing_engine.do("change_parent", {'nodes': ["A"], 'parent_data': "P",
                                              'callback': seen.append})
        moved = seen[0]
        assert set(moved.ids()) == {"A", "C1", "C2", "e1", "e3"}
        # Every element handed over is the live, re-created object
        assert all(replacing_graph.contains(e) for e in moved)

        replacing_engine.undo()
        assert not any(replacing_graph.contains(e) for e in moved)
        assert set(seen[1].ids()) == {"A", "C1", "C2", "e1", "e3"}


# ═════════════════════════════════════════════════════════════════
#  SEQUENCES
# ═════════════════════════════════════════════════════════════════

_SEQUENCE = [
    ("add", [{'group': 'nodes', 'id': 'Z', 'position': {'x': 1, 'y': 1}}]),
    ("move", {'eles': ["D"], 'location': {'parent': "A"}}),
    ("drag", {'position_diff': (5, 3), 'nodes': ["A"], 'move': True}),
    ("change_parent", {'nodes': ["B"], 'parent_data': "P", 'pos_diff_x': 1, 'pos_diff_y': 1}),
    ("select", ["B", "e1"]),
    ("layout", {'options': {'name': 'grid'}}),
    ("remove", ["C2"]),
]


@pytest.mark.parametrize("graph_fixture, engine_fixture", [
    ("graph", "engine"),
    ("replacing_graph", "replacing_engine"),
])
def test_n_do_then_n_undo_restores_document(request, snapshot, graph_fixture, engine_fixture):
    graph = request.getfixturevalue(graph_fixture)
    engine = request.getfixturevalue(engine_fixture)

    initial = snapshot(graph)
    for name, args in _SEQUENCE:
        engine.do(name, args)
    final = snapshot(graph)

    for _ in _SEQUENCE:
        engine.undo()
    assert snapshot(graph) == initial

    engine.redo_all()
    assert snapshot(graph) == final
