"""
    Drag interaction adapter.

    Turns the ``grab`` / ``free`` events a host emits around a pointer
    drag into a single ``drag`` command, so that the whole drag is one
    undo step.  The host has already moved the nodes when ``free``
    fires, so the command is issued with ``move=False``.
"""
import logging
from typing import Any, Callable, Optional, Union

from graph_api.models.collection import Collection
from graph_api.models.graph import Graph
from graph_api.models.node import Node
from graph_api.types import Position

logger = logging.getLogger(__name__)

Undoable = Union[bool, Callable[[Node], bool]]


class DragUndoAdapter:
    """
    Listens to a document's pointer events on behalf of one engine.

    Args:
        graph:    Document emitting ``grab`` / ``free`` with ``node=``.
        engine:   Engine receiving the ``drag`` commands.
        undoable: True / False, or a predicate ``(node) -> bool``.
    """

    def __init__(self, graph: Graph, engine, undoable: Undoable = True):
        self._graph = graph
        self._engine = engine
        self.undoable = undoable
        self._grabbed: Optional[Node] = None
        self._grab_position: Optional[Position] = None
        self._attached = False

    def attach(self) -> 'DragUndoAdapter':
        if not self._attached:
            self._graph.subscribe("grab", self._on_grab)
            # Engine errors propagate to the caller of notify("free")
            self._graph.subscribe("free", self._on_free, raise_errors=True)
            self._attached = True
        return self

    def detach(self) -> None:
        if self._attached:
            self._graph.unsubscribe("grab", self._on_grab)
            self._graph.unsubscribe("free", self._on_free)
            self._attached = False
        self._grabbed = None
        self._grab_position = None

    @property
    def attached(self) -> bool:
        return self._attached

    def _is_undoable(self, node: Node) -> bool:
        if callable(self.undoable):
            return bool(self.undoable(node))
        return bool(self.undoable)

    def _on_grab(self, node: Node, **_: Any) -> None:
        if self._is_undoable(node):
            self._grabbed = node
            self._grab_position = self._graph.get_position(node)

    def _on_free(self, node: Node, **_: Any) -> None:
        if not self._is_undoable(node) or self._grabbed is None:
            return

        node, grab_position = self._grabbed, self._grab_position
        self._grabbed = None
        self._grab_position = None

        position_diff = self._graph.get_position(node) - grab_position
        if position_diff.is_zero():
            return

        if node.selected:
            nodes = self._graph.query("node:visible:selected")
        else:
            nodes = Collection([node])
        logger.debug("Drag of %d node(s) by (%s, %s) recorded",
                     len(nodes), position_diff.x, position_diff.y)
        self._engine.do("drag", {'position_diff': position_diff, 'nodes': nodes, 'move': False})
