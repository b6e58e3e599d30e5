"""
    Element model - common base for nodes and edges of a document.
"""
from typing import Dict, Any


class Element:
    """
    Base class for everything that lives in a graph document.

    An element is identified by its ID, carries arbitrary data and two
    pieces of interaction state: selection and visibility.
    """

    group = "elements"

    def __init__(self, element_id: Any, **data):
        """
        Initialize an element.

        Args:
            element_id: Unique identifier of the element (will be converted to str)
            **data: Arbitrary element data
        """
        # Ensure ID is always a string for consistency in comparisons
        self.element_id = str(element_id)
        self.data: Dict[str, Any] = dict(data)
        self.selected = False
        self.visible = True

    @property
    def is_node(self) -> bool:
        return False

    @property
    def is_edge(self) -> bool:
        return False

    def get_data(self, key: str) -> Any:
        return self.data.get(key)

    def set_data(self, key: str, value: Any) -> None:
        self.data[key] = value

    def clone(self) -> 'Element':
        """
        Create a new element object with the same ID, data and state.
        Used by documents whose structural moves replace elements.
        """
        raise NotImplementedError

    def _copy_state_to(self, other: 'Element') -> 'Element':
        other.selected = self.selected
        other.visible = self.visible
        return other

    def to_dict(self) -> Dict[str, Any]:
        return {
            'group': self.group,
            'id': self.element_id,
            'data': dict(self.data),
            'selected': self.selected,
            'visible': self.visible,
        }
