# tests/conftest.py
"""
Shared test fixtures.
Stub document: a small nested diagram.

    P  (compound)          A  (compound)          B (100, 100)
    └── p1 (200, 0)        ├── C1 (0, 0)          D (50, 50)
                           └── C2 (20, 10)

    edges:  e1 C1 -> B,  e2 B -> D,  e3 C2 -> p1
"""
import pytest

from graph_api.models.graph import Graph
from graph_api.models.node import Node
from graph_api.models.edge import Edge
from graph_undo_redo.core import UndoRedoManager


# ── Node definitions (id, parent, position) ──────────────────────
_NODES = [
    ("P",  None, (0, 0)),
    ("p1", "P",  (200, 0)),
    ("A",  None, (0, 0)),
    ("C1", "A",  (0, 0)),
    ("C2", "A",  (20, 10)),
    ("B",  None, (100, 100)),
    ("D",  None, (50, 50)),
]

# ── Edge definitions ─────────────────────────────────────────────
_EDGES = [
    ("e1", "C1", "B"),
    ("e2", "B",  "D"),
    ("e3", "C2", "p1"),
]


def _build_graph(graph_id: str = "stub_diagram", in_place_move: bool = True) -> Graph:
    g = Graph(graph_id, in_place_move=in_place_move)

    for node_id, parent, position in _NODES:
        g.add_node(Node(node_id, parent, position, label=node_id.lower()))

    for edge_id, src, tgt in _EDGES:
        g.add_edge(Edge(edge_id, src, tgt))

    return g


def _snapshot(graph: Graph) -> dict:
    """Order-independent picture of structure, positions and selection."""
    return {
        'nodes': {
            n.node_id: (n.parent_id, graph.get_position(n).to_dict(), n.selected)
            for n in graph.nodes()
        },
        'edges': {
            e.edge_id: (e.source_id, e.target_id, e.selected)
            for e in graph.edges()
        },
    }


# ── Pytest fixtures ──────────────────────────────────────────────

@pytest.fixture
def graph() -> Graph:
    """Nested stub document whose moves keep element identity."""
    return _build_graph()


@pytest.fixture
def replacing_graph() -> Graph:
    """Same document, but structural moves re-create the moved elements."""
    return _build_graph("stub_replacing", in_place_move=False)


@pytest.fixture
def snapshot():
    """Callable returning a comparable snapshot of a graph."""
    return _snapshot


@pytest.fixture
def manager() -> UndoRedoManager:
    return UndoRedoManager()


@pytest.fixture
def engine(manager, graph):
    """Engine with default actions for ``graph``."""
    return manager.undo_redo(graph)


@pytest.fixture
def replacing_engine(manager, replacing_graph):
    return manager.undo_redo(replacing_graph)
