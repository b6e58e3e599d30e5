"""
Graph Undo/Redo — reversible command execution for graph documents.

Public API:
    UndoRedoManager     – one engine per document, created on first access
    UndoRedo            – the command stack engine
    UndoRedoOptions     – engine configuration
    ActionRegistry      – name → (do, undo) table
    run_batch           – batch composer
    move_nodes          – hierarchy position translator
    DragUndoAdapter     – pointer drag → ``drag`` command
"""
from .core import (
    UndoRedo,
    UndoRedoManager,
    StackEntry,
    EVENT_BEFORE_DO,
    EVENT_AFTER_DO,
    EVENT_BEFORE_UNDO,
    EVENT_AFTER_UNDO,
    EVENT_BEFORE_REDO,
    EVENT_AFTER_REDO,
)
from .config import UndoRedoOptions
from .registry import ActionDescriptor, ActionRegistry
from .batch import run_batch, validate_batch
from .positions import get_top_most_nodes, move_nodes
from .drag_adapter import DragUndoAdapter
from .actions import default_actions
from .exceptions import UndoRedoError, UnknownActionError

__all__ = [
    'UndoRedo',
    'UndoRedoManager',
    'StackEntry',
    'UndoRedoOptions',
    'ActionDescriptor',
    'ActionRegistry',
    'run_batch',
    'validate_batch',
    'get_top_most_nodes',
    'move_nodes',
    'DragUndoAdapter',
    'default_actions',
    'UndoRedoError',
    'UnknownActionError',
    'EVENT_BEFORE_DO',
    'EVENT_AFTER_DO',
    'EVENT_BEFORE_UNDO',
    'EVENT_AFTER_UNDO',
    'EVENT_BEFORE_REDO',
    'EVENT_AFTER_REDO',
]
