"""
Default reversible actions.

    insert / add, remove, restore, select, unselect  – element lifecycle
    move                                            – reparent / reconnect
    drag                                            – translate subtrees
    layout                                          – positions snapshot
    change_parent                                   – reparent with offset
    batch                                           – compound action
"""
from typing import Dict

from graph_api.models.graph import Graph

from ..batch import DO, UNDO, run_batch
from ..registry import ActionDescriptor, ActionRegistry
from .elements import element_actions
from .move import move_action
from .drag import drag_action
from .layout import layout_action, return_to_positions
from .change_parent import change_parent_action


def batch_action(registry: ActionRegistry) -> ActionDescriptor:
    """``batch``: run a list of ``{'name', 'param'}`` entries as one action."""
    return ActionDescriptor(
        "batch",
        lambda action_list, first_time=False: run_batch(registry, action_list, DO, first_time),
        lambda action_list: run_batch(registry, action_list, UNDO),
    )


def default_actions(graph: Graph, registry: ActionRegistry) -> Dict[str, ActionDescriptor]:
    """
    Build the built-in actions for a document.

    Args:
        graph:    Document the actions mutate.
        registry: Registry the ``batch`` action resolves its entries from.
    """
    actions = element_actions(graph)
    for descriptor in (
        move_action(graph),
        drag_action(graph),
        layout_action(graph),
        change_parent_action(graph),
        batch_action(registry),
    ):
        actions[descriptor.name] = descriptor
    return actions


__all__ = [
    'default_actions',
    'batch_action',
    'element_actions',
    'move_action',
    'drag_action',
    'layout_action',
    'change_parent_action',
    'return_to_positions',
]
