"""
Graph API — hierarchical document models, layouts and plugin contracts.
"""
from .types import Position, as_position
from .models.element import Element
from .models.node import Node
from .models.edge import Edge
from .models.collection import Collection
from .models.graph import Graph, element_from_definition
from .plugins.base import LayoutPlugin, ActionPlugin

__all__ = [
    'Position',
    'as_position',
    'Element',
    'Node',
    'Edge',
    'Collection',
    'Graph',
    'element_from_definition',
    'LayoutPlugin',
    'ActionPlugin',
]
