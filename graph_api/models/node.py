"""
    Node model - representation of a node in the document.
"""
from typing import Dict, Any, Optional

from ..types import Position, PositionLike, as_position
from .element import Element


class Node(Element):
    """
    A node of a hierarchical graph document.

    Each node has an ID, arbitrary data, an optional parent (referenced
    by ID) and a position.  A node that owns children is a compound
    node: its position is derived from its children by the document,
    so the stored position only matters while the node is a leaf.
    """

    group = "nodes"

    def __init__(
            self,
            node_id: Any,
            parent: Optional[Any] = None,
            position: Optional[PositionLike] = None,
            **data
    ):
        """
        Initialize a node.

        Args:
            node_id: Unique identifier of the node (will be converted to str)
            parent: ID of the parent node, ``None`` for a top-level node
            position: Initial position (``Position``, ``{'x', 'y'}`` or ``(x, y)``)
            **data: Arbitrary node data
        """
        super().__init__(node_id, **data)
        self.parent_id: Optional[str] = None if parent is None else str(parent)
        self.position: Position = as_position(position) if position is not None else Position()

    @property
    def node_id(self) -> str:
        return self.element_id

    @property
    def is_node(self) -> bool:
        return True

    def clone(self) -> 'Node':
        node = Node(self.element_id, self.parent_id, self.position, **self.data)
        return self._copy_state_to(node)

    def __repr__(self) -> str:
        parent = f", parent={self.parent_id}" if self.parent_id else ""
        return f"Node({self.node_id}{parent}, x={self.position.x}, y={self.position.y})"

    def __eq__(self, other) -> bool:
        """Two nodes are equal if they have the same ID"""
        if not isinstance(other, Node):
            return False
        return self.node_id == other.node_id

    def __hash__(self) -> int:
        """Hash node by ID"""
        return hash(('nodes', self.node_id))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['parent'] = self.parent_id
        result['position'] = self.position.to_dict()
        return result
