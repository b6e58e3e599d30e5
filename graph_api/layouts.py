"""
    Layout algorithms.

    Built-in layouts cover the common cases; additional algorithms are
    discovered through the ``graph_api.layouts`` entry-point group.
    Layouts only place leaf nodes: compound nodes follow their children.
"""
import logging
import math
import random
from typing import Any, Dict, List, Mapping, Optional

from .types import Position, as_position
from .models.node import Node
from .models.collection import Collection
from .plugins.base import LayoutPlugin
from .plugins.loader import PluginLoader, create_layout_loader

logger = logging.getLogger(__name__)


def _origin(options: Mapping[str, Any]) -> Position:
    return as_position(options.get('origin', (0, 0)))


class GridLayout(LayoutPlugin):
    """Rows of ``cols`` nodes, ``spacing`` apart."""

    def get_plugin_name(self) -> str:
        return "grid"

    def compute(self, graph, nodes: List[Node], options: Mapping[str, Any]) -> Dict[str, Position]:
        if not nodes:
            return {}
        cols = int(options.get('cols') or math.ceil(math.sqrt(len(nodes))))
        spacing = float(options.get('spacing', 100))
        origin = _origin(options)
        return {
            node.node_id: Position(origin.x + (i % cols) * spacing,
                                   origin.y + (i // cols) * spacing)
            for i, node in enumerate(nodes)
        }


class CircleLayout(LayoutPlugin):
    """Evenly spaced on a circle around ``origin``."""

    def get_plugin_name(self) -> str:
        return "circle"

    def compute(self, graph, nodes: List[Node], options: Mapping[str, Any]) -> Dict[str, Position]:
        if not nodes:
            return {}
        radius = float(options.get('radius', max(50.0, 20.0 * len(nodes))))
        origin = _origin(options)
        step = 2 * math.pi / len(nodes)
        return {
            node.node_id: Position(origin.x + radius * math.cos(i * step),
                                   origin.y + radius * math.sin(i * step))
            for i, node in enumerate(nodes)
        }


class PresetLayout(LayoutPlugin):
    """Positions taken verbatim from ``options['positions']``."""

    def get_plugin_name(self) -> str:
        return "preset"

    def compute(self, graph, nodes: List[Node], options: Mapping[str, Any]) -> Dict[str, Position]:
        positions = options.get('positions') or {}
        return {
            node.node_id: as_position(positions[node.node_id])
            for node in nodes if node.node_id in positions
        }


class RandomLayout(LayoutPlugin):
    """Uniformly random inside a ``width`` x ``height`` box."""

    def get_plugin_name(self) -> str:
        return "random"

    def compute(self, graph, nodes: List[Node], options: Mapping[str, Any]) -> Dict[str, Position]:
        rng = random.Random(options.get('seed'))
        width = float(options.get('width', 1000))
        height = float(options.get('height', 1000))
        origin = _origin(options)
        return {
            node.node_id: Position(origin.x + rng.uniform(0, width),
                                   origin.y + rng.uniform(0, height))
            for node in nodes
        }


BUILTIN_LAYOUTS: Dict[str, LayoutPlugin] = {
    layout.get_plugin_name(): layout
    for layout in (GridLayout(), CircleLayout(), PresetLayout(), RandomLayout())
}

_plugin_loader: Optional[PluginLoader[LayoutPlugin]] = None


def get_layout(name: str) -> LayoutPlugin:
    """
    Resolve a layout algorithm by name.

    Raises:
        ValueError: If no built-in or installed layout has that name.
    """
    global _plugin_loader
    if name in BUILTIN_LAYOUTS:
        return BUILTIN_LAYOUTS[name]
    if _plugin_loader is None:
        _plugin_loader = create_layout_loader()
    plugin = _plugin_loader.get(name)
    if plugin is None:
        raise ValueError(
            f"Layout '{name}' not found. "
            f"Available: {sorted(BUILTIN_LAYOUTS) + _plugin_loader.get_names()}"
        )
    return plugin


class LayoutRun:
    """
    A prepared layout over a set of nodes.

    ``run()`` places the nodes synchronously and emits ``layout_stop``
    on the graph.  Hosts with animated layouts may settle later; callers
    only get the synchronous result.
    """

    def __init__(self, graph, nodes: Collection, options: Dict[str, Any]):
        self.graph = graph
        self.nodes = nodes
        self.options = options
        self.algorithm = get_layout(options.get('name', 'grid'))

    def _leaves(self) -> List[Node]:
        leaves: List[Node] = []
        seen = set()
        for node in self.nodes:
            members = [node] + list(self.graph.descendants(node))
            for member in members:
                if member.node_id in seen or self.graph.is_parent(member):
                    continue
                seen.add(member.node_id)
                leaves.append(member)
        return leaves

    def run(self) -> 'LayoutRun':
        positions = self.algorithm.compute(self.graph, self._leaves(), self.options)
        for node_id, position in positions.items():
            self.graph.set_position(node_id, position)
        logger.debug("Graph %s: layout '%s' placed %d nodes",
                     self.graph.graph_id, self.algorithm.get_plugin_name(), len(positions))
        self.graph.notify("layout_stop", layout=self)
        return self
