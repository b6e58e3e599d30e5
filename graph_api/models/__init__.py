"""
Document models — elements, collections and the graph itself.
"""
from .element import Element
from .node import Node
from .edge import Edge
from .collection import Collection
from .graph import Graph, element_from_definition

__all__ = ['Element', 'Node', 'Edge', 'Collection', 'Graph', 'element_from_definition']
