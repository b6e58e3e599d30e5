"""
    Drag action: translate a node set (and its subtrees) by a delta.
"""
from typing import Any, Dict

from graph_api.models.graph import Graph
from graph_api.types import as_position

from ..positions import move_nodes
from ..registry import ActionDescriptor


def drag_action(graph: Graph) -> ActionDescriptor:
    """
    Build the ``drag`` action.

    Args are ``{'position_diff': delta, 'nodes': ..., 'move': bool}``.
    A pointer drag has already moved the nodes, so it is recorded with
    ``move=False`` and the first run only stores it.  The undo result
    carries ``move=True`` so that a redo re-applies the delta.
    """

    def do_drag(args: Dict[str, Any], first_time: bool = False) -> Dict[str, Any]:
        if args.get('move'):
            move_nodes(graph, args['position_diff'], args['nodes'])
            graph.unselect(graph.elements())
        return args

    def undo_drag(args: Dict[str, Any]) -> Dict[str, Any]:
        nodes = graph.collection(args['nodes'])
        result = {
            'position_diff': args['position_diff'],
            'nodes': nodes,
            'move': True,
        }
        move_nodes(graph, -as_position(args['position_diff']), nodes)
        graph.unselect(graph.elements())
        return result

    return ActionDescriptor("drag", do_drag, undo_drag)
