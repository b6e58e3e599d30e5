"""
    Hierarchy position translator.

    Shifts a set of nodes, together with everything nested inside them,
    by one delta.  Only the topmost nodes of the set are walked, so a
    node whose ancestor is in the same set is moved exactly once.
    Compound nodes are never shifted themselves: their position follows
    from their children.
"""
from typing import List

from graph_api.models.graph import Graph, ElementsLike
from graph_api.models.node import Node
from graph_api.types import PositionLike, as_position


def get_top_most_nodes(graph: Graph, nodes: ElementsLike) -> List[Node]:
    """Members of ``nodes`` with no ancestor also in ``nodes``."""
    members = list(graph.collection(nodes).nodes())
    member_ids = {n.node_id for n in members}
    return [
        node for node in members
        if not any(a.node_id in member_ids for a in graph.ancestors(node))
    ]


def move_nodes(graph: Graph, position_diff: PositionLike, nodes: ElementsLike,
               top_most_only: bool = True) -> None:
    """
    Translate ``nodes`` and their descendants by ``position_diff``.

    Args:
        graph:         Document owning the nodes.
        position_diff: Delta as ``Position``, ``{'x', 'y'}`` or ``(x, y)``.
        nodes:         Anything ``Graph.collection`` accepts.
        top_most_only: Reduce the set to its topmost nodes first.  Pass
                       False only when the set is already disjoint.
    """
    delta = as_position(position_diff)
    if top_most_only:
        roots = get_top_most_nodes(graph, nodes)
    else:
        roots = list(graph.collection(nodes).nodes())

    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        if graph.is_parent(node):
            stack.extend(reversed(list(graph.children(node))))
        else:
            graph.set_position(node, graph.get_position(node) + delta)
