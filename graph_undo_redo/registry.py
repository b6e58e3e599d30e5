"""
    Action registry — name → reversible action table.

    Every reversible action is an ``ActionDescriptor``: a ``do`` function
    called as ``do(args)`` (or ``do(args, first_time)`` when it wants to
    know whether this is the first run) and an ``undo`` function called
    as ``undo(args)``.  Each returns the arguments for the opposite
    direction, so the result of ``do`` can be fed to ``undo`` and the
    result of ``undo`` can be fed back to ``do`` for a redo.
"""
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping

from .exceptions import UnknownActionError

logger = logging.getLogger(__name__)

DoFunction = Callable[[Any, bool], Any]
UndoFunction = Callable[[Any], Any]


def _accepts_first_time(do: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(do, follow_wrapped=False).parameters.values()
    except (TypeError, ValueError):
        # Builtins without a signature get the full call
        return True
    positional = 0
    for p in parameters:
        if p.kind == p.VAR_POSITIONAL:
            return True
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


def as_do_function(do: Callable[..., Any]) -> DoFunction:
    """
    Adapt ``do`` to the ``do(args, first_time)`` calling convention.

    A do-function taking only ``args`` is wrapped so that the engine
    can always pass ``first_time``; it simply never sees it.
    """
    if _accepts_first_time(do):
        return do

    @functools.wraps(do)
    def do_ignoring_first_time(args: Any, first_time: bool = False) -> Any:
        return do(args)

    return do_ignoring_first_time


@dataclass(frozen=True)
class ActionDescriptor:
    """
    A named ``do`` / ``undo`` pair.

    ``do`` may be written as ``do(args)`` or ``do(args, first_time)``;
    the stored function always accepts both arguments.
    """
    name: str
    do: DoFunction
    undo: UndoFunction

    def __post_init__(self):
        object.__setattr__(self, "do", as_do_function(self.do))


def as_descriptor(name: str, value: Any) -> ActionDescriptor:
    """
    Build a descriptor from the loose shapes accepted in options:
    a descriptor, a ``(do, undo)`` pair or a ``{'do': ..., 'undo': ...}`` dict.
    """
    if isinstance(value, ActionDescriptor):
        return value if value.name == name else ActionDescriptor(name, value.do, value.undo)
    if isinstance(value, Mapping):
        return ActionDescriptor(name, value['do'], value['undo'])
    try:
        do, undo = value
    except (TypeError, ValueError):
        raise ValueError(f"Action '{name}' must be a (do, undo) pair, got {value!r}")
    return ActionDescriptor(name, do, undo)


class ActionRegistry:
    """
    Mapping from action name to its ``ActionDescriptor``.

    Registering an existing name overwrites it.  Lookups of unknown
    names raise ``UnknownActionError``.
    """

    def __init__(self):
        self._actions: Dict[str, ActionDescriptor] = {}

    def register(self, name: str, do: DoFunction, undo: UndoFunction) -> ActionDescriptor:
        descriptor = ActionDescriptor(name, do, undo)
        self._actions[name] = descriptor
        logger.debug("Action registered: %s", name)
        return descriptor

    def add(self, descriptor: ActionDescriptor) -> None:
        self._actions[descriptor.name] = descriptor

    def update(self, actions: Mapping[str, Any]) -> None:
        """Merge several actions given in any shape ``as_descriptor`` accepts."""
        for name, value in actions.items():
            self.add(as_descriptor(name, value))

    def remove(self, name: str) -> None:
        """Delete an action; unknown names are ignored."""
        self._actions.pop(name, None)

    def get(self, name: str) -> ActionDescriptor:
        try:
            return self._actions[name]
        except KeyError:
            raise UnknownActionError(name) from None

    def names(self) -> List[str]:
        return sorted(self._actions.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __repr__(self) -> str:
        return f"ActionRegistry({', '.join(self.names())})"
