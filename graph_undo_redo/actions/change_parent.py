"""
    Change-parent action: move a node set, with its descendants, into a
    new parent and shift it by an offset.

    Two variants exist, picked from the document's capability:

    • fine-grained (``graph.in_place_move``) – elements keep their
      identity, so each node's own prior parent and prior position are
      recorded and restored exactly;
    • coarse – the document re-creates moved elements, so the action
      swaps the induced element sets: undo removes what the move created
      and restores what it replaced.

    Both variants invoke the optional ``callback`` with the resulting
    elements after every run and carry it forward in their result.
"""
from typing import Any, Dict, Mapping

from graph_api.models.collection import Collection
from graph_api.models.graph import Graph
from graph_api.types import Position

from ..positions import move_nodes
from ..registry import ActionDescriptor


def _with_descendants(graph: Graph, nodes: Collection) -> Collection:
    result = nodes
    for node in nodes:
        result = result.union(graph.descendants(node))
    return result


def _offset(param: Mapping[str, Any]) -> Position:
    return Position(float(param.get('pos_diff_x') or 0), float(param.get('pos_diff_y') or 0))


def change_parent_fine(graph: Graph, param: Mapping[str, Any], first_time: bool) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    if first_time:
        nodes = graph.collection(param['nodes']).nodes()
        new_parent_id = param.get('parent_data')
        with_descendants = _with_descendants(graph, nodes)

        result['old_parent'] = {n.node_id: n.parent_id for n in with_descendants}
        result['old_position'] = graph.positions(with_descendants)
        result['new_parent'] = new_parent_id
        result['moved_eles'] = with_descendants

        graph.move_nodes(nodes, new_parent_id)
        move_nodes(graph, _offset(param), with_descendants)
    else:
        moved = param['moved_eles']
        new_parent = param['old_parent']

        result['old_parent'] = {n.node_id: n.parent_id for n in moved}
        result['old_position'] = graph.positions(moved)
        result['new_parent'] = new_parent
        result['moved_eles'] = moved

        for node in moved:
            if isinstance(new_parent, Mapping):
                graph.move_nodes(node, new_parent.get(node.node_id))
            else:
                graph.move_nodes(node, new_parent)
            graph.set_position(node, param['old_position'][node.node_id])
    return result


def change_parent_coarse(graph: Graph, param: Mapping[str, Any], first_time: bool) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    if first_time:
        nodes = graph.collection(param['nodes']).nodes()
        with_descendants = _with_descendants(graph, nodes)
        # Everything the move takes out of the document, put back on undo
        result['eles_to_restore'] = with_descendants.union(graph.connected_edges(with_descendants))
        new_tops = graph.move_nodes(nodes, param.get('parent_data'))
        created = _with_descendants(graph, new_tops)
        # Everything the move creates, taken out on undo
        result['moved_eles'] = created.union(graph.connected_edges(created))
        move_nodes(graph, _offset(param), new_tops)
    else:
        result['eles_to_restore'] = graph.remove(param['moved_eles'])
        result['moved_eles'] = graph.restore(param['eles_to_restore'])
    return result


def change_parent_action(graph: Graph) -> ActionDescriptor:
    """
    Build the ``change_parent`` action.

    do-args: ``{'nodes': ..., 'parent_data': id | None, 'pos_diff_x': dx,
    'pos_diff_y': dy, 'callback': optional callable}``.
    """

    def run(param: Mapping[str, Any], first_time: bool = False) -> Dict[str, Any]:
        if graph.in_place_move:
            result = change_parent_fine(graph, param, first_time)
        else:
            result = change_parent_coarse(graph, param, first_time)

        callback = param.get('callback')
        if callback:
            result['callback'] = callback
            callback(result['moved_eles'])
        return result

    return ActionDescriptor("change_parent", run, lambda param: run(param, False))
