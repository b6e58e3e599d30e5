"""
    Abstract base classes for plugins.
    Defines the "Contract" that all plugins must follow.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Tuple, Callable

from ..types import Position
from ..models.node import Node


class LayoutPlugin(ABC):
    """
        Abstract base class for layout algorithm plugins.
        Pattern: Strategy (for node placement).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
            Returns the unique name of the layout.
            Example: "grid"
        """
        pass

    @abstractmethod
    def compute(self, graph, nodes: List[Node], options: Mapping[str, Any]) -> Dict[str, Position]:
        """
        Main method: computes new positions for the given leaf nodes.

        Args:
            graph: The document being laid out.
            nodes: Leaf nodes to place (compound nodes follow their children).
            options: Layout options as passed to ``Graph.layout``.

        Returns:
            Dict mapping node ID -> new position.  Nodes left out keep
            their current position.
        """
        pass


class ActionPlugin(ABC):
    """
        Abstract base class for plugins contributing reversible actions.
        Pattern: Command (each action is a do / undo pair).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """Returns the unique name of the plugin."""
        pass

    @abstractmethod
    def get_actions(self, graph) -> Dict[str, Tuple[Callable[..., Any], Callable[..., Any]]]:
        """
        Main method: builds the actions this plugin provides for a document.

        Args:
            graph: The document the actions will operate on.

        Returns:
            Dict mapping action name -> ``(do, undo)`` pair, where
            ``do(args, first_time)`` and ``undo(args)`` each return the
            arguments for the opposite direction.
        """
        pass
