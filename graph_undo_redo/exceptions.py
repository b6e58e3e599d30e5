# graph_undo_redo/exceptions.py

class UndoRedoError(Exception):
    """Base class for undo/redo engine errors."""
    pass


class UnknownActionError(UndoRedoError, KeyError):
    """Raised when an action name is not registered."""

    def __init__(self, action_name: str, message: str = ""):
        self.action_name = action_name
        super().__init__(message or f"Action {action_name} does not exist as an undoable function")

    def __str__(self) -> str:
        # KeyError would otherwise quote the message
        return self.args[0]
