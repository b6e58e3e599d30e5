"""
    Edge model - representation of an edge between nodes.
"""
from typing import Dict, Any, Optional, Tuple

from .element import Element


class Edge(Element):
    """
        Class for a directed edge between two nodes.
        Endpoints are referenced by node ID so that an edge record stays
        valid while its endpoints are removed and restored.
    """

    group = "edges"

    def __init__(self, edge_id: Any, source: Any, target: Any, **data):
        """
        Initialize an edge.

        Args:
            edge_id: Unique identifier of the edge (will be converted to str)
            source: ID of the source node
            target: ID of the target node
            **data: Arbitrary edge data
        """
        super().__init__(edge_id, **data)
        self.source_id = str(source)
        self.target_id = str(target)

    @property
    def edge_id(self) -> str:
        return self.element_id

    @property
    def is_edge(self) -> bool:
        return True

    def get_source_target(self) -> Tuple[str, str]:
        """Get source and target node IDs"""
        return self.source_id, self.target_id

    def get_other_end(self, node_id: str) -> Optional[str]:
        if node_id == self.source_id:
            return self.target_id
        elif node_id == self.target_id:
            return self.source_id
        return None

    def connects(self, node_id: str) -> bool:
        return node_id in (self.source_id, self.target_id)

    def clone(self) -> 'Edge':
        edge = Edge(self.element_id, self.source_id, self.target_id, **self.data)
        return self._copy_state_to(edge)

    def __repr__(self) -> str:
        return f"Edge({self.source_id} -> {self.target_id})"

    def __eq__(self, other) -> bool:
        """Two edges are equal if they have the same ID"""
        if not isinstance(other, Edge):
            return False
        return self.edge_id == other.edge_id

    def __hash__(self) -> int:
        """Hash edge by ID"""
        return hash(('edges', self.edge_id))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['source'] = self.source_id
        result['target'] = self.target_id
        return result
