"""
    Collection - ordered set of document elements.

    Collections are keyed by element ID and keep insertion order.  They
    hold the element objects themselves, so a collection of removed
    elements can later be handed back to ``Graph.restore`` and the very
    same objects re-enter the document.
"""
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from .element import Element
from .node import Node
from .edge import Edge


class Collection:
    """Ordered, duplicate-free set of elements with basic set algebra."""

    def __init__(self, elements: Optional[Iterable[Element]] = None):
        self._elements: Dict[str, Element] = {}
        for element in elements or ():
            self._add(element)

    def _add(self, element: Element) -> None:
        if not isinstance(element, Element):
            raise TypeError(f"Collections hold elements, got {type(element).__name__}")
        self._elements.setdefault(element.element_id, element)

    # ── Sequence protocol ────────────────────────────────────────

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self._elements.values()))

    def __len__(self) -> int:
        return len(self._elements)

    def __bool__(self) -> bool:
        return bool(self._elements)

    def __getitem__(self, index: int) -> Element:
        return list(self._elements.values())[index]

    def __contains__(self, item: Union[Element, str]) -> bool:
        if isinstance(item, Element):
            return self._elements.get(item.element_id) is item
        return str(item) in self._elements

    # ── Accessors ────────────────────────────────────────────────

    def ids(self) -> List[str]:
        return list(self._elements.keys())

    def get(self, element_id: str) -> Optional[Element]:
        return self._elements.get(element_id)

    def first(self) -> Optional[Element]:
        return next(iter(self._elements.values()), None)

    def is_empty(self) -> bool:
        return not self._elements

    def nodes(self) -> 'Collection':
        return Collection(e for e in self._elements.values() if isinstance(e, Node))

    def edges(self) -> 'Collection':
        return Collection(e for e in self._elements.values() if isinstance(e, Edge))

    # ── Set algebra ──────────────────────────────────────────────

    def union(self, other: Iterable[Element]) -> 'Collection':
        """Elements of this collection followed by the new ones of ``other``."""
        result = Collection(self._elements.values())
        for element in other:
            result._add(element)
        return result

    def filter(self, predicate: Callable[[Element], bool]) -> 'Collection':
        return Collection(e for e in self._elements.values() if predicate(e))

    def difference(self, other: Iterable[Element]) -> 'Collection':
        """Complement of ``other`` relative to this collection."""
        excluded = {e.element_id for e in other}
        return Collection(e for e in self._elements.values() if e.element_id not in excluded)

    def __repr__(self) -> str:
        return f"Collection({', '.join(self._elements.keys())})"
