"""
    UndoRedo — the command stack engine, and UndoRedoManager — the map
    from documents to their engines.

    Design Patterns applied
    ───────────────────────
    • Command            – every step is a named action with its args;
                           the registered do / undo pair returns the args
                           for the opposite direction.
    • Repository         – ``UndoRedoManager`` keeps one engine per
                           document, created on first access.
    • Observer (hooks)   – six lifecycle events, delivered both to the
                           option hooks and to the document's listeners.

    Stack protocol
    ──────────────
    ``do`` clears the redo stack, pushes a first-time entry on it and
    immediately redoes that entry, so a first run and a replay share one
    code path.  Every executed step moves exactly one entry from one
    stack to the other, carrying the step's result as the new args.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from graph_api.models.graph import Graph
from graph_api.plugins.loader import create_action_loader

from .actions import default_actions
from .config import UndoRedoOptions
from .drag_adapter import DragUndoAdapter
from .registry import ActionRegistry, DoFunction, UndoFunction

logger = logging.getLogger(__name__)


# ── Lifecycle event types ────────────────────────────────────────
EVENT_BEFORE_DO = "before_do"
EVENT_AFTER_DO = "after_do"
EVENT_BEFORE_UNDO = "before_undo"
EVENT_AFTER_UNDO = "after_undo"
EVENT_BEFORE_REDO = "before_redo"
EVENT_AFTER_REDO = "after_redo"

_NO_RESULT = object()


@dataclass
class StackEntry:
    """
    One entry of the undo or redo stack.

    Attributes:
        name:       Registered action name.
        args:       Arguments for the next execution of the entry.
        first_time: True only for the entry ``do`` pushes before running it.
    """
    name: str
    args: Any = None
    first_time: bool = False

    @classmethod
    def from_value(cls, value: Union['StackEntry', Mapping[str, Any]]) -> 'StackEntry':
        if isinstance(value, StackEntry):
            return value
        return cls(value['name'], value.get('args'), bool(value.get('first_time', False)))

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'args': self.args}


class UndoRedo:
    """
    Undo/redo engine bound to one document.

    Usage:
        engine = UndoRedoManager().undo_redo(graph)
        engine.do("remove", ["n1"])
        engine.undo()
        engine.redo()
    """

    def __init__(self, graph: Graph, options: Optional[UndoRedoOptions] = None):
        self.graph = graph
        self.options: UndoRedoOptions = options or UndoRedoOptions()
        self.actions = ActionRegistry()
        self._undo_stack: List[StackEntry] = []
        self._redo_stack: List[StackEntry] = []
        self._drag_adapter: Optional[DragUndoAdapter] = None

    # ── Stack protocol ───────────────────────────────────────────

    def do(self, action_name: str, args: Any = None) -> Any:
        """
        Run an action for the first time and record it.

        Returns:
            Whatever the action's do-function returned.

        Raises:
            UnknownActionError: If ``action_name`` is not registered.
        """
        self._redo_stack.clear()
        self._redo_stack.append(StackEntry(action_name, args, first_time=True))
        return self.redo()

    def redo(self) -> Any:
        """Re-run the most recently undone step (``None`` if there is none)."""
        if self.is_redo_stack_empty():
            if self.options.debug_logging:
                logger.warning("Redoing cannot be done because redo stack is empty!")
            return None

        entry = self._redo_stack.pop()
        first_time = entry.first_time
        self._fire(EVENT_BEFORE_DO if first_time else EVENT_BEFORE_REDO, entry.name, entry.args)

        result = self.actions.get(entry.name).do(entry.args, first_time)

        self._undo_stack.append(StackEntry(entry.name, result))
        limit = self.options.stack_size_limit
        if limit is not None and len(self._undo_stack) > limit:
            evicted = self._undo_stack.pop(0)
            if self.options.debug_logging:
                logger.debug("Undo stack limit %d reached, dropped '%s'", limit, evicted.name)

        self._fire(EVENT_AFTER_DO if first_time else EVENT_AFTER_REDO,
                   entry.name, entry.args, result)
        return result

    def undo(self) -> Any:
        """Reverse the most recent step (``None`` if there is none)."""
        if self.is_undo_stack_empty():
            if self.options.debug_logging:
                logger.warning("Undoing cannot be done because undo stack is empty!")
            return None

        entry = self._undo_stack.pop()
        self._fire(EVENT_BEFORE_UNDO, entry.name, entry.args)

        result = self.actions.get(entry.name).undo(entry.args)

        self._redo_stack.append(StackEntry(entry.name, result))
        self._fire(EVENT_AFTER_UNDO, entry.name, entry.args, result)
        return result

    def undo_all(self) -> None:
        while not self.is_undo_stack_empty():
            self.undo()

    def redo_all(self) -> None:
        while not self.is_redo_stack_empty():
            self.redo()

    # ── Registry ─────────────────────────────────────────────────

    def action(self, action_name: str, do: DoFunction, undo: UndoFunction) -> 'UndoRedo':
        """Register (or overwrite) an action.  Returns the engine for chaining."""
        self.actions.register(action_name, do, undo)
        return self

    def remove_action(self, action_name: str) -> None:
        self.actions.remove(action_name)

    # ── Stack inspection / rehydration ───────────────────────────

    def is_undo_stack_empty(self) -> bool:
        return not self._undo_stack

    def is_redo_stack_empty(self) -> bool:
        return not self._redo_stack

    def get_undo_stack(self) -> List[StackEntry]:
        """Entries of the undo stack, oldest first (a copy)."""
        return list(self._undo_stack)

    def get_redo_stack(self) -> List[StackEntry]:
        """Entries of the redo stack, oldest first (a copy)."""
        return list(self._redo_stack)

    def reset(self, undos: Optional[Iterable[Any]] = None,
              redos: Optional[Iterable[Any]] = None) -> None:
        """
        Replace both stacks.

        Args:
            undos: ``StackEntry`` objects or ``{'name', 'args'}`` mappings.
            redos: Same, for the redo stack.
        """
        self._undo_stack = [StackEntry.from_value(e) for e in (undos or [])]
        self._redo_stack = [StackEntry.from_value(e) for e in (redos or [])]
        logger.debug("Graph %s: stacks reset (%d undo, %d redo)",
                     self.graph.graph_id, len(self._undo_stack), len(self._redo_stack))

    # ── Drag integration ─────────────────────────────────────────

    @property
    def drag_adapter(self) -> Optional[DragUndoAdapter]:
        return self._drag_adapter

    def enable_drag_undo(self, undoable: Any = True) -> DragUndoAdapter:
        """Record pointer drags on the document as ``drag`` commands."""
        if self._drag_adapter is None:
            self._drag_adapter = DragUndoAdapter(self.graph, self, undoable).attach()
        else:
            self._drag_adapter.undoable = undoable
        return self._drag_adapter

    def disable_drag_undo(self) -> None:
        if self._drag_adapter is not None:
            self._drag_adapter.detach()
            self._drag_adapter = None

    # ── Notifications ────────────────────────────────────────────

    def _fire(self, event: str, action_name: str, args: Any, result: Any = _NO_RESULT) -> None:
        if self.options.debug_logging:
            logger.debug("Graph %s: %s '%s'", self.graph.graph_id, event, action_name)

        hook = self.options.hook(event)
        if result is _NO_RESULT:
            if hook is not None:
                hook(action_name, args)
            self.graph.notify(event, action_name=action_name, args=args)
        else:
            if hook is not None:
                hook(action_name, args, result)
            self.graph.notify(event, action_name=action_name, args=args, result=result)

    def __repr__(self) -> str:
        return (
            f"UndoRedo(graph={self.graph.graph_id}, "
            f"undo={len(self._undo_stack)}, redo={len(self._redo_stack)})"
        )


class UndoRedoManager:
    """
    Keeps one ``UndoRedo`` engine per document.

    Engines are created on first access and live until disposed.
    Documents are keyed by ``graph_id``.
    """

    def __init__(self):
        self._engines: Dict[str, UndoRedo] = {}
        self._initialized: Dict[str, bool] = {}

    def undo_redo(self, graph: Graph,
                  options: Union[UndoRedoOptions, Mapping[str, Any], None] = None,
                  dont_init: bool = False) -> UndoRedo:
        """
        Return the engine of ``graph``, creating it on first access.

        Args:
            graph:     The document.
            options:   ``UndoRedoOptions`` (replaces the current options) or
                       a mapping of option names (only those are changed).
                       Actions in ``options.actions`` are merged into the
                       registry.
            dont_init: Skip installing default actions and drag tracking
                       on the engine's first initialization.

        Raises:
            ValueError: If another document with the same ``graph_id``
                        already has an engine.
        """
        engine = self._engines.get(graph.graph_id)
        if engine is None:
            engine = UndoRedo(graph)
            self._engines[graph.graph_id] = engine
            logger.info("Undo/redo engine created for graph %s", graph.graph_id)
        elif engine.graph is not graph:
            raise ValueError(
                f"Another document with id '{graph.graph_id}' already has an undo/redo engine."
            )

        first_init = not self._initialized.get(graph.graph_id) and not dont_init
        if first_init:
            engine.actions.update(default_actions(graph, engine.actions))

        if options is not None:
            if isinstance(options, UndoRedoOptions):
                engine.options = options
            else:
                engine.options = engine.options.merged(options)
            engine.actions.update(options.actions if isinstance(options, UndoRedoOptions)
                                  else options.get('actions', {}))

        if first_init:
            if engine.options.load_plugins:
                self._load_plugin_actions(engine)
            if engine.options.undoable_drag is not False:
                engine.enable_drag_undo(engine.options.undoable_drag)
            self._initialized[graph.graph_id] = True
        elif engine.drag_adapter is not None:
            engine.enable_drag_undo(engine.options.undoable_drag)

        if engine.options.ready is not None:
            engine.options.ready()
        return engine

    @staticmethod
    def _load_plugin_actions(engine: UndoRedo) -> None:
        loader = create_action_loader()
        for name, plugin in loader.load_all().items():
            engine.actions.update(plugin.get_actions(engine.graph))
            logger.info("Actions of plugin '%s' registered for graph %s",
                        name, engine.graph.graph_id)

    def get(self, graph: Graph) -> Optional[UndoRedo]:
        """Engine of ``graph`` if one exists, without creating it."""
        engine = self._engines.get(graph.graph_id)
        return engine if engine is not None and engine.graph is graph else None

    def dispose(self, graph: Graph) -> None:
        """Drop the engine of ``graph`` and stop its drag tracking."""
        engine = self.get(graph)
        if engine is None:
            return
        engine.disable_drag_undo()
        del self._engines[graph.graph_id]
        self._initialized.pop(graph.graph_id, None)
        logger.info("Undo/redo engine disposed for graph %s", graph.graph_id)

    def reset(self) -> None:
        """Dispose every engine."""
        for engine in list(self._engines.values()):
            self.dispose(engine.graph)

    def __contains__(self, graph: Graph) -> bool:
        return self.get(graph) is not None

    def __len__(self) -> int:
        return len(self._engines)

    def __repr__(self) -> str:
        return f"UndoRedoManager(engines={len(self._engines)})"
