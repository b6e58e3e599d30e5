"""
    Structural move action: reparent nodes and / or reconnect edges.

    The do-direction records, per element, where that element came from
    (its own parent, or its own endpoints), so the undo puts every
    element back individually even when the set was heterogeneous.
"""
from typing import Any, Dict

from graph_api.models.collection import Collection
from graph_api.models.graph import Graph

from ..registry import ActionDescriptor


def move_action(graph: Graph) -> ActionDescriptor:
    """
    Build the ``move`` action.

    do-args:   ``{'eles': ..., 'location': {'parent': id | None}}`` for nodes,
               ``{'source': id, 'target': id}`` for edges (both may be combined).
    undo-args: the move record returned by do.
    """

    def do_move(args: Dict[str, Any], first_time: bool = False) -> Dict[str, Any]:
        eles = graph.collection(args['eles'])
        location = args.get('location') or {}
        nodes = eles.nodes() if 'parent' in location else Collection()
        edges = eles.edges() if ('source' in location or 'target' in location) else Collection()

        old_nodes_parents = {n.node_id: n.parent_id for n in nodes}
        old_edges_sources = {e.edge_id: e.source_id for e in edges}
        old_edges_targets = {e.edge_id: e.target_id for e in edges}

        new_nodes = graph.move_nodes(nodes, location['parent']) if nodes else Collection()
        new_edges = (graph.move_edges(edges, location.get('source'), location.get('target'))
                     if edges else Collection())
        return {
            'old_nodes_parents': old_nodes_parents,
            'new_nodes': new_nodes,
            'old_edges_sources': old_edges_sources,
            'old_edges_targets': old_edges_targets,
            'new_edges': new_edges,
        }

    def undo_move(record: Dict[str, Any]) -> Dict[str, Any]:
        new_eles = Collection()
        location: Dict[str, Any] = {}

        new_nodes = record['new_nodes']
        if new_nodes:
            location['parent'] = graph.get_node(new_nodes[0].node_id).parent_id
            for node in new_nodes:
                moved = graph.move_nodes([node.node_id], record['old_nodes_parents'][node.node_id])
                new_eles = new_eles.union(moved)

        new_edges = record['new_edges']
        if new_edges:
            first = graph.get_edge(new_edges[0].edge_id)
            location['source'] = first.source_id
            location['target'] = first.target_id
            for edge in new_edges:
                moved = graph.move_edges([edge.edge_id],
                                         record['old_edges_sources'][edge.edge_id],
                                         record['old_edges_targets'][edge.edge_id])
                new_eles = new_eles.union(moved)

        return {'eles': new_eles, 'location': location}

    return ActionDescriptor("move", do_move, undo_move)
