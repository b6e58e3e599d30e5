"""
    Batch composer — run several registered actions as one unit.

    A batch is an ordered list of ``{'name': ..., 'param': ...}`` entries.
    Running it in either direction returns a new list holding each
    entry's result, in reverse order, so the returned batch can be
    passed straight back for the opposite direction.
"""
import logging
from typing import Any, Dict, List, Mapping, Sequence

from .exceptions import UnknownActionError
from .registry import ActionRegistry

logger = logging.getLogger(__name__)

DO = "do"
UNDO = "undo"


def validate_batch(registry: ActionRegistry, action_list: Sequence[Mapping[str, Any]]) -> None:
    """
    Check that every entry names a registered action.

    If one of them cannot be executed, the whole batch could not be
    reversed after a partial run, so nothing may run at all.

    Raises:
        UnknownActionError: For the first unknown name.
    """
    for entry in action_list:
        if entry['name'] not in registry:
            raise UnknownActionError(entry['name'])


def run_batch(registry: ActionRegistry, action_list: Sequence[Mapping[str, Any]],
              direction: str = DO, first_time: bool = False) -> List[Dict[str, Any]]:
    """
    Execute a batch in the given direction.

    Entries run in the order given for both directions; since every
    result is prepended, the batch returned by a do-run lists the last
    executed entry first, which is the order its undo-run needs.

    Args:
        registry:    Registry resolving the entry names.
        action_list: ``[{'name': ..., 'param': ...}, ...]``
        direction:   ``'do'`` or ``'undo'``.
        first_time:  Forwarded to every do-function of the batch.

    Returns:
        ``[{'name': ..., 'param': result}, ...]`` in reverse order.
    """
    if direction not in (DO, UNDO):
        raise ValueError(f"Unknown batch direction: '{direction}'")

    validate_batch(registry, action_list)

    results: List[Dict[str, Any]] = []
    for entry in action_list:
        descriptor = registry.get(entry['name'])
        if direction == UNDO:
            result = descriptor.undo(entry.get('param'))
        else:
            result = descriptor.do(entry.get('param'), first_time)
        results.insert(0, {'name': entry['name'], 'param': result})

    logger.debug("Batch %s: %d action(s)", direction, len(results))
    return results
