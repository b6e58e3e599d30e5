"""
    Engine configuration — stack limit, drag behaviour, lifecycle hooks.

    ``UndoRedoOptions`` plays the role a platform config plays for a
    service: a typed dataclass with sensible defaults that can be
    partially overridden when an engine is (re)initialized.
"""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Union

Hook = Optional[Callable[..., Any]]


@dataclass
class UndoRedoOptions:
    """
    Options of one undo/redo engine.

    Attributes:
        debug_logging:    Log empty-stack no-ops and every executed step.
        actions:          Extra actions merged into the registry,
                          ``name -> (do, undo)`` / descriptor / dict.
        undoable_drag:    Whether pointer drags become ``drag`` commands;
                          a predicate ``(node) -> bool`` decides per node.
        stack_size_limit: Maximum undo-stack length, ``None`` = unbounded.
                          The oldest entry is evicted first.
        before_do .. after_redo:
                          Lifecycle hooks called with
                          ``(action_name, args)`` before and
                          ``(action_name, args, result)`` after a step.
        ready:            Called (no arguments) once initialization completes.
        load_plugins:     Merge actions contributed by installed
                          ``graph_undo_redo.actions`` plugins.
    """
    debug_logging: bool = False
    actions: Dict[str, Any] = field(default_factory=dict)
    undoable_drag: Union[bool, Callable[[Any], bool]] = True
    stack_size_limit: Optional[int] = None
    before_do: Hook = None
    after_do: Hook = None
    before_undo: Hook = None
    after_undo: Hook = None
    before_redo: Hook = None
    after_redo: Hook = None
    ready: Hook = None
    load_plugins: bool = False

    def __post_init__(self):
        if self.stack_size_limit is not None and self.stack_size_limit < 0:
            raise ValueError("stack_size_limit must be >= 0 or None")

    def merged(self, changes: Mapping[str, Any]) -> 'UndoRedoOptions':
        """
        Return a copy with the given fields replaced.

        Raises:
            ValueError: On an unknown option name.
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown undo/redo option(s): {sorted(unknown)}")
        return replace(self, **changes)

    def hook(self, event: str) -> Hook:
        """Lifecycle hook registered for ``event`` (e.g. ``'after_undo'``)."""
        return getattr(self, event, None)
