"""
    Geometry types shared by the document and the undo/redo core.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Union


@dataclass(frozen=True)
class Position:
    """A point (or an offset) in model coordinates."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Position') -> 'Position':
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Position') -> 'Position':
        return Position(self.x - other.x, self.y - other.y)

    def __neg__(self) -> 'Position':
        return Position(-self.x, -self.y)

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}


PositionLike = Union[Position, Mapping[str, Any], Sequence[float]]


def as_position(value: PositionLike) -> Position:
    """
    Coerce ``value`` into a ``Position``.

    Accepts a ``Position``, a mapping with ``x`` / ``y`` keys or an
    ``(x, y)`` pair.
    """
    if isinstance(value, Position):
        return value
    if isinstance(value, Mapping):
        try:
            return Position(float(value['x']), float(value['y']))
        except KeyError as e:
            raise ValueError(f"Position mapping is missing key {e}")
    try:
        x, y = value
    except (TypeError, ValueError):
        raise ValueError(f"Cannot convert {value!r} to a position")
    return Position(float(x), float(y))
