"""
    Graph model - hierarchical graph document.
    Nodes may be nested inside compound nodes, edges connect any two nodes.
"""
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..types import Position, PositionLike, as_position
from .element import Element
from .node import Node
from .edge import Edge
from .collection import Collection

logger = logging.getLogger(__name__)

ElementsLike = Union[None, str, Element, Collection, Callable[[Element], bool], Iterable[Any]]

_SELECTOR_RE = re.compile(r'^(node|edge|\*)?(?:#([^:\s]+))?((?::[a-z]+)*)$')

_PSEUDO_CLASSES: Dict[str, Callable[['Graph', Element], bool]] = {
    'selected': lambda g, e: e.selected,
    'unselected': lambda g, e: not e.selected,
    'visible': lambda g, e: e.visible,
    'hidden': lambda g, e: not e.visible,
    'parent': lambda g, e: e.is_node and g.is_parent(e),
    'childless': lambda g, e: e.is_node and not g.is_parent(e),
}


def element_from_definition(definition: Mapping[str, Any]) -> Element:
    """
    Build a node or edge from a plain definition dict.

    Accepted shapes (keys may also live inside ``data``):
        {'group': 'nodes', 'id': 'a', 'parent': 'p', 'position': {'x': 1, 'y': 2}}
        {'group': 'edges', 'id': 'e', 'source': 'a', 'target': 'b'}
    """
    data = dict(definition.get('data') or {})
    element_id = definition.get('id', data.pop('id', None))
    if element_id is None:
        raise ValueError(f"Element definition without id: {definition!r}")

    group = definition.get('group')
    if group is None:
        group = 'edges' if ('source' in definition or 'source' in data) else 'nodes'

    if group == 'edges':
        source = definition.get('source', data.pop('source', None))
        target = definition.get('target', data.pop('target', None))
        if source is None or target is None:
            raise ValueError(f"Edge definition '{element_id}' needs source and target")
        element = Edge(element_id, source, target, **data)
    elif group == 'nodes':
        parent = definition.get('parent', data.pop('parent', None))
        element = Node(element_id, parent, definition.get('position'), **data)
    else:
        raise ValueError(f"Unknown element group: '{group}'")

    element.selected = bool(definition.get('selected', False))
    return element


class Graph:
    """
        Hierarchical graph document.

        Provides the capability set the undo/redo core relies on:
        element queries and set algebra, insert / remove with
        identity-preserving restore, reparenting and reconnecting,
        positions, selection, layouts and named events.

        ``in_place_move`` describes how structural moves behave.  When
        True, moved nodes and edges keep their identity.  When False,
        moves replace the moved elements with fresh objects carrying the
        same IDs (the moved subtree and its edges are re-created).
    """

    def __init__(self, graph_id: str, in_place_move: bool = True):
        """
        Initialize a graph.
        Args:
            graph_id: Unique identifier of the graph
            in_place_move: Whether structural moves preserve element identity
        """
        self.graph_id = graph_id
        self.in_place_move = in_place_move
        self._nodes: Dict[str, Node] = {}  # node_id -> Node
        self._edges: Dict[str, Edge] = {}  # edge_id -> Edge
        self._adjacency_list: Dict[str, List[Edge]] = {}  # node_id -> [Edges]
        self._children: Dict[str, List[str]] = {}  # node_id -> [child node_ids]
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}
        self._raising_listeners: Dict[str, List[Callable[..., Any]]] = {}

    # ── Single element insertion ─────────────────────────────────

    def add_node(self, node: Node) -> None:
        """Add a node to the graph"""
        if self.has_id(node.node_id):
            raise ValueError(f"Element with id {node.node_id} already exists")
        if node.parent_id is not None and node.parent_id not in self._nodes:
            raise ValueError(f"Parent node {node.parent_id} not in graph")

        self._nodes[node.node_id] = node
        self._adjacency_list[node.node_id] = []
        self._children.setdefault(node.node_id, [])
        if node.parent_id is not None:
            self._children[node.parent_id].append(node.node_id)

    def add_edge(self, edge: Edge) -> None:
        """Add an edge to the graph"""
        if edge.source_id not in self._nodes:
            raise ValueError(f"Source node {edge.source_id} not in graph")
        if edge.target_id not in self._nodes:
            raise ValueError(f"Target node {edge.target_id} not in graph")
        if self.has_id(edge.edge_id):
            raise ValueError(f"Element with id {edge.edge_id} already exists")

        self._edges[edge.edge_id] = edge
        self._link_edge(edge)

    def _link_edge(self, edge: Edge) -> None:
        # Add to adjacency list for both nodes (optimization for faster access)
        self._adjacency_list[edge.source_id].append(edge)
        if edge.source_id != edge.target_id:
            self._adjacency_list[edge.target_id].append(edge)

    def _unlink_edge(self, edge: Edge) -> None:
        for node_id in (edge.source_id, edge.target_id):
            if node_id in self._adjacency_list:
                self._adjacency_list[node_id] = [
                    e for e in self._adjacency_list[node_id] if e is not edge
                ]

    # ── Bulk insertion / removal ─────────────────────────────────

    def add(self, eles: Any) -> Collection:
        """
        Insert new elements.

        Args:
            eles: Element objects, definition dicts, or an iterable of either.

        Returns:
            Collection of the inserted elements.

        Raises:
            ValueError: If an ID is taken, or a parent / endpoint is missing.
                        Nothing is inserted in that case.
        """
        if isinstance(eles, (Element, Mapping)):
            eles = [eles]
        elements = [
            e if isinstance(e, Element) else element_from_definition(e)
            for e in eles
        ]

        nodes = [e for e in elements if isinstance(e, Node)]
        edges = [e for e in elements if isinstance(e, Edge)]

        # Validate everything up-front so a bad definition inserts nothing
        seen = set()
        for element in elements:
            if self.has_id(element.element_id) or element.element_id in seen:
                raise ValueError(f"Element with id {element.element_id} already exists")
            seen.add(element.element_id)
        new_node_ids = {n.node_id for n in nodes}
        for edge in edges:
            for endpoint in (edge.source_id, edge.target_id):
                if endpoint not in self._nodes and endpoint not in new_node_ids:
                    raise ValueError(f"Edge {edge.edge_id}: node {endpoint} not in graph")

        ordered = self._parents_first(nodes)
        for node in ordered:
            self.add_node(node)
        for edge in edges:
            self.add_edge(edge)

        added = Collection(ordered + edges)
        self.notify("add", elements=added)
        return added

    def remove(self, eles: ElementsLike) -> Collection:
        """
        Remove elements from the graph.

        Removing a node also removes its descendants and every edge
        connected to the removed nodes.  Removed objects keep their
        parent / endpoint references, so ``restore`` can put them back.

        Returns:
            Collection of everything removed (nodes parents-first, then edges).
        """
        requested = self.collection(eles)

        removed_nodes: List[Node] = []
        seen = set()
        for node in requested.nodes():
            if not self.contains(node) or node.node_id in seen:
                continue
            for member in [node] + list(self.descendants(node)):
                if member.node_id not in seen:
                    seen.add(member.node_id)
                    removed_nodes.append(member)

        removed_edges: List[Edge] = [e for e in requested.edges() if self.contains(e)]
        for edge in self.connected_edges(removed_nodes):
            if edge not in removed_edges:
                removed_edges.append(edge)

        for edge in removed_edges:
            self._unlink_edge(edge)
            del self._edges[edge.edge_id]

        # Deepest nodes first so parents never lose a still-present child
        for node in reversed(removed_nodes):
            if node.parent_id is not None and node.parent_id in self._children:
                self._children[node.parent_id].remove(node.node_id)
            del self._nodes[node.node_id]
            del self._adjacency_list[node.node_id]
            self._children.pop(node.node_id, None)

        result = Collection(removed_nodes + removed_edges)
        if result:
            self.notify("remove", elements=result)
        return result

    def restore(self, eles: ElementsLike) -> Collection:
        """
        Put previously removed element objects back into the graph.

        Elements that are already part of the graph are skipped.

        Raises:
            ValueError: If another element with the same ID is present, or
                        a parent / endpoint is missing.
        """
        requested = self.collection(eles)
        pending = [e for e in requested if not self.contains(e)]
        for element in pending:
            if self.has_id(element.element_id):
                raise ValueError(f"Element with id {element.element_id} already exists")

        nodes = self._parents_first([e for e in pending if isinstance(e, Node)])
        edges = [e for e in pending if isinstance(e, Edge)]
        for node in nodes:
            self.add_node(node)
        for edge in edges:
            self.add_edge(edge)

        result = Collection(nodes + edges)
        if result:
            self.notify("restore", elements=result)
        return result

    @staticmethod
    def _parents_first(nodes: List[Node]) -> List[Node]:
        """Order nodes so that every parent in the list precedes its children."""
        pending = list(nodes)
        ordered: List[Node] = []
        while pending:
            pending_ids = {n.node_id for n in pending}
            ready = [n for n in pending if n.parent_id not in pending_ids]
            if not ready:
                raise ValueError("Parent cycle among nodes: " + ", ".join(sorted(pending_ids)))
            ordered.extend(ready)
            pending = [n for n in pending if n.parent_id in pending_ids]
        return ordered

    # ── Lookup ───────────────────────────────────────────────────

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def get_element(self, element_id: str) -> Optional[Element]:
        return self._nodes.get(element_id) or self._edges.get(element_id)

    def has_id(self, element_id: str) -> bool:
        return element_id in self._nodes or element_id in self._edges

    def contains(self, element: Element) -> bool:
        """Whether this exact element object is part of the graph."""
        return self.get_element(element.element_id) is element

    def nodes(self) -> Collection:
        return Collection(self._nodes.values())

    def edges(self) -> Collection:
        return Collection(self._edges.values())

    def elements(self) -> Collection:
        return Collection(list(self._nodes.values()) + list(self._edges.values()))

    def get_number_of_nodes(self) -> int:
        return len(self._nodes)

    def get_number_of_edges(self) -> int:
        return len(self._edges)

    def query(self, selector: str) -> Collection:
        """
        Select elements with a small selector language.

        Supported: ``*``, ``node``, ``edge``, ``#id`` and the pseudo-classes
        ``:selected``, ``:unselected``, ``:visible``, ``:hidden``,
        ``:parent``, ``:childless``.  Parts may be combined
        (``node:selected``) and comma-separated for a union.
        """
        result = Collection()
        for part in selector.split(','):
            part = part.strip()
            match = _SELECTOR_RE.match(part)
            if not part or match is None:
                raise ValueError(f"Invalid selector: '{selector}'")
            group, element_id, pseudo = match.groups()

            if group == 'node':
                candidates = self.nodes()
            elif group == 'edge':
                candidates = self.edges()
            else:
                candidates = self.elements()

            if element_id is not None:
                candidates = candidates.filter(lambda e, i=element_id: e.element_id == i)
            for name in filter(None, pseudo.split(':')):
                check = _PSEUDO_CLASSES.get(name)
                if check is None:
                    raise ValueError(f"Unknown pseudo-class: ':{name}'")
                candidates = candidates.filter(lambda e, c=check: c(self, e))
            result = result.union(candidates)
        return result

    def collection(self, eles: ElementsLike) -> Collection:
        """
        Normalize anything element-like into a ``Collection``.

        Accepts ``None``, a collection, a selector string, a single
        element, a predicate, or an iterable of elements and element IDs.
        """
        if eles is None:
            return Collection()
        if isinstance(eles, Collection):
            return eles
        if isinstance(eles, str):
            return self.query(eles)
        if isinstance(eles, Element):
            return Collection([eles])
        if callable(eles):
            return self.elements().filter(eles)

        result = []
        for item in eles:
            if isinstance(item, Element):
                result.append(item)
                continue
            element = self.get_element(str(item))
            if element is None:
                raise ValueError(f"Element {item} not in graph")
            result.append(element)
        return Collection(result)

    def _require_node(self, node: Union[Node, str]) -> Node:
        node_id = node.node_id if isinstance(node, Node) else str(node)
        found = self._nodes.get(node_id)
        if found is None:
            raise ValueError(f"Node {node_id} not in graph")
        return found

    # ── Hierarchy ────────────────────────────────────────────────

    def parent(self, node: Union[Node, str]) -> Optional[Node]:
        node = self._require_node(node)
        if node.parent_id is None:
            return None
        return self._nodes.get(node.parent_id)

    def children(self, node: Union[Node, str]) -> Collection:
        node = self._require_node(node)
        return Collection(self._nodes[c] for c in self._children.get(node.node_id, []))

    def is_parent(self, node: Union[Node, str]) -> bool:
        node_id = node.node_id if isinstance(node, Node) else str(node)
        return bool(self._children.get(node_id))

    def descendants(self, node: Union[Node, str]) -> Collection:
        """All nodes nested (at any depth) inside ``node``, in pre-order."""
        node = self._require_node(node)
        result: List[Node] = []
        stack = list(reversed(self._children.get(node.node_id, [])))
        while stack:
            child = self._nodes[stack.pop()]
            result.append(child)
            stack.extend(reversed(self._children.get(child.node_id, [])))
        return Collection(result)

    def ancestors(self, node: Union[Node, str]) -> List[Node]:
        """Parent chain of ``node`` up to the document root, nearest first."""
        node = self._require_node(node)
        result: List[Node] = []
        parent_id = node.parent_id
        while parent_id is not None and parent_id in self._nodes:
            parent = self._nodes[parent_id]
            result.append(parent)
            parent_id = parent.parent_id
        return result

    def connected_edges(self, nodes: Iterable[Node]) -> Collection:
        edges: List[Edge] = []
        for node in nodes:
            edges.extend(self._adjacency_list.get(node.node_id, []))
        return Collection(edges)

    # ── Structural moves ─────────────────────────────────────────

    def move_nodes(self, nodes: ElementsLike, parent_id: Optional[str]) -> Collection:
        """
        Reparent nodes under ``parent_id`` (``None`` = top level).

        Returns:
            The moved nodes.  With ``in_place_move=False`` these are new
            objects; the old ones (with their descendants and connected
            edges) are no longer part of the graph.
        """
        moved = [self._require_node(n) for n in self.collection(nodes).nodes()]
        if parent_id is not None:
            parent = self._require_node(parent_id)
            forbidden = {parent.node_id} | {a.node_id for a in self.ancestors(parent)}
            for node in moved:
                if node.node_id in forbidden:
                    raise ValueError(
                        f"Cannot move node {node.node_id} into its own subtree ({parent_id})"
                    )
            parent_id = parent.node_id

        if self.in_place_move:
            for node in moved:
                if node.parent_id is not None:
                    self._children[node.parent_id].remove(node.node_id)
                node.parent_id = parent_id
                if parent_id is not None:
                    self._children[parent_id].append(node.node_id)
            result = Collection(moved)
        else:
            removed = self.remove(moved)
            clones = {e.element_id: e.clone() for e in removed}
            for node in moved:
                clones[node.node_id].parent_id = parent_id
            self.restore(Collection(clones.values()))
            result = Collection(clones[n.node_id] for n in moved)

        self.notify("move", elements=result)
        return result

    def move_edges(self, edges: ElementsLike, source: Optional[str] = None,
                   target: Optional[str] = None) -> Collection:
        """
        Reconnect edges to new endpoints.  An endpoint left as ``None``
        is kept as it is.
        """
        for endpoint in (source, target):
            if endpoint is not None:
                self._require_node(endpoint)

        result: List[Edge] = []
        for requested in self.collection(edges).edges():
            # Resolve by ID: a replacing move may have re-created the edge
            edge = self._edges.get(requested.edge_id)
            if edge is None:
                raise ValueError(f"Edge {requested.edge_id} not in graph")
            if self.in_place_move:
                self._unlink_edge(edge)
                edge.source_id = edge.source_id if source is None else str(source)
                edge.target_id = edge.target_id if target is None else str(target)
                self._link_edge(edge)
                result.append(edge)
            else:
                self.remove(edge)
                replacement = edge.clone()
                replacement.source_id = edge.source_id if source is None else str(source)
                replacement.target_id = edge.target_id if target is None else str(target)
                self.add_edge(replacement)
                result.append(replacement)

        moved = Collection(result)
        self.notify("move", elements=moved)
        return moved

    # ── Positions ────────────────────────────────────────────────

    def get_position(self, node: Union[Node, str]) -> Position:
        """
        Position of a node.  Compound nodes report the centre of the
        bounding box of their leaf descendants.
        """
        node = self._require_node(node)
        if not self.is_parent(node):
            return node.position

        leaves = [d for d in self.descendants(node) if not self.is_parent(d)]
        xs = [leaf.position.x for leaf in leaves]
        ys = [leaf.position.y for leaf in leaves]
        return Position((min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2)

    def set_position(self, node: Union[Node, str], position: PositionLike) -> None:
        """Set a leaf node's position.  Ignored for compound nodes."""
        node = self._require_node(node)
        if self.is_parent(node):
            logger.debug("Graph %s: position of compound node %s is derived, not set",
                         self.graph_id, node.node_id)
            return
        node.position = as_position(position)

    def positions(self, eles: ElementsLike = None) -> Dict[str, Position]:
        """Map node ID -> position for the given nodes (default: all)."""
        nodes = self.nodes() if eles is None else self.collection(eles).nodes()
        return {n.node_id: self.get_position(n) for n in nodes}

    # ── Selection ────────────────────────────────────────────────

    def select(self, eles: ElementsLike) -> Collection:
        collection = self.collection(eles)
        for element in collection:
            element.selected = True
        self.notify("select", elements=collection)
        return collection

    def unselect(self, eles: ElementsLike) -> Collection:
        collection = self.collection(eles)
        for element in collection:
            element.selected = False
        self.notify("unselect", elements=collection)
        return collection

    # ── Layout ───────────────────────────────────────────────────

    def layout(self, options: Optional[Mapping[str, Any]] = None,
               eles: ElementsLike = None):
        """
        Prepare a layout over ``eles`` (default: the whole graph).

        Returns:
            A ``LayoutRun``; call ``run()`` to apply it.
        """
        from ..layouts import LayoutRun
        nodes = self.nodes() if eles is None else self.collection(eles).nodes()
        return LayoutRun(self, nodes, dict(options or {}))

    # ── Events ───────────────────────────────────────────────────

    def subscribe(self, event: str, callback: Callable[..., Any],
                  raise_errors: bool = False) -> None:
        """
        Register a callback for a named graph event.

        Args:
            event:        Event name, e.g. ``"free"``.
            callback:     Called with the event's keyword arguments.
            raise_errors: Let exceptions from ``callback`` propagate out of
                          ``notify`` instead of logging them.
        """
        self._listeners.setdefault(event, []).append(callback)
        if raise_errors:
            self._raising_listeners.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """Remove a previously registered callback."""
        for registry in (self._listeners, self._raising_listeners):
            listeners = registry.get(event, [])
            if callback in listeners:
                listeners.remove(callback)

    def notify(self, event: str, **kwargs: Any) -> None:
        """
        Fire all callbacks registered for the given event.

        A failing callback is logged and the remaining ones still run,
        unless it was subscribed with ``raise_errors=True``.
        """
        raising = self._raising_listeners.get(event, [])
        for cb in list(self._listeners.get(event, [])):
            try:
                cb(**kwargs)
            except Exception as exc:
                if cb in raising:
                    raise
                logger.error("Graph %s: listener failed for '%s': %s",
                             self.graph_id, event, exc)

    # ── Dunder / serialization ───────────────────────────────────

    def __repr__(self) -> str:
        return f"Graph({self.graph_id}, nodes={len(self._nodes)}, edges={len(self._edges)})"

    def to_dict(self) -> Dict:
        nodes = []
        for node in self._nodes.values():
            entry = node.to_dict()
            entry['position'] = self.get_position(node).to_dict()
            nodes.append(entry)
        return {
            'id': self.graph_id,
            'nodes': nodes,
            'edges': [edge.to_dict() for edge in self._edges.values()]
        }
