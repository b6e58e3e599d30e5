"""
    Layout action: run a layout and make it reversible through position maps.
"""
from typing import Any, Dict, Mapping

from graph_api.models.graph import Graph
from graph_api.types import Position

from ..registry import ActionDescriptor


def return_to_positions(graph: Graph, positions: Mapping[str, Any]) -> Dict[str, Position]:
    """
    Snap every leaf node to its entry in ``positions``.

    Nodes without an entry stay where they are.

    Returns:
        The leaf positions observed just before snapping.
    """
    current: Dict[str, Position] = {}
    for node in graph.nodes():
        if graph.is_parent(node):
            continue
        current[node.node_id] = graph.get_position(node)
        if node.node_id in positions:
            graph.set_position(node, positions[node.node_id])
    return current


def layout_action(graph: Graph) -> ActionDescriptor:
    """
    Build the ``layout`` action.

    First run: ``{'options': {...}, 'eles': optional subset}``; captures
    every node position, runs the layout and returns the captured map.
    Afterwards both directions take a position map and return the map
    they replaced.
    """

    def do_layout(args: Mapping[str, Any], first_time: bool = False) -> Dict[str, Position]:
        if first_time:
            positions = graph.positions()
            graph.layout(args.get('options'), args.get('eles')).run()
            return positions
        return return_to_positions(graph, args)

    def undo_layout(positions: Mapping[str, Any]) -> Dict[str, Position]:
        return return_to_positions(graph, positions)

    return ActionDescriptor("layout", do_layout, undo_layout)
