"""
    Element lifecycle and selection actions: insert, remove, restore,
    select, unselect.
"""
from typing import Dict

from graph_api.models.collection import Collection
from graph_api.models.graph import Graph

from ..registry import ActionDescriptor


def element_actions(graph: Graph) -> Dict[str, ActionDescriptor]:
    """Build the insert / remove / restore / select / unselect actions for ``graph``."""

    def insert(eles, first_time=False) -> Collection:
        # First run creates the elements, a redo brings back the removed objects
        if first_time:
            return graph.add(eles)
        return graph.restore(eles)

    def remove(eles, first_time=False) -> Collection:
        return graph.remove(eles)

    def restore(eles, first_time=False) -> Collection:
        return graph.restore(eles)

    def select(eles, first_time=False) -> Collection:
        """Select, returning only the elements whose state changed."""
        changed = graph.collection(eles).filter(lambda e: not e.selected)
        return graph.select(changed)

    def unselect(eles, first_time=False) -> Collection:
        changed = graph.collection(eles).filter(lambda e: e.selected)
        return graph.unselect(changed)

    return {
        "insert": ActionDescriptor("insert", insert, graph.remove),
        "add": ActionDescriptor("add", insert, graph.remove),
        "remove": ActionDescriptor("remove", remove, graph.restore),
        "restore": ActionDescriptor("restore", restore, graph.remove),
        "select": ActionDescriptor("select", select, lambda eles: unselect(eles)),
        "unselect": ActionDescriptor("unselect", unselect, lambda eles: select(eles)),
    }
