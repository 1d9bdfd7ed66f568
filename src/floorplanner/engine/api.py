"""Core API for scripted floor editing.

This module provides the main interface for applying operation dicts to a
graph store, one at a time or as a script. Scripts can bind the result of
an operation with ``"as": "name"`` and refer to it later as ``"@name"``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .ops import InvalidOperation, get_operation
from .store import FloorGraph
from .validators import InvalidFloor, validate_all

LOGGER = logging.getLogger(__name__)

_RESERVED_KEYS = ("op", "type", "as")


def apply(graph: FloorGraph, operation: dict) -> Any:
    """Apply an operation to the graph store and return its result.

    Args:
        graph: The graph store to modify in place.
        operation: Dictionary describing the operation to apply.

    Returns:
        The operation's result, typically the id of the created entity.

    Raises:
        ValueError: If the operation dict is malformed.
        InvalidOperation: If the operation is unknown or its precheck fails.
    """
    operation_type = operation.get("op") or operation.get("type")

    if operation_type is None:
        raise ValueError("Operation must have an 'op' or 'type' field")

    try:
        op = get_operation(operation_type)
    except KeyError:
        raise InvalidOperation(f"Unknown operation type: {operation_type}")

    # Extract operation parameters (exclude 'op', 'type' and 'as' fields)
    params = {k: v for k, v in operation.items() if k not in _RESERVED_KEYS}

    # precheck takes the same parameters as apply, so binding errors show up here
    try:
        ok = op.precheck(graph, **params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for operation '{operation_type}': {e}") from e
    if not ok:
        raise InvalidOperation(f"Precheck failed for operation '{operation_type}'")

    result = op.apply(graph, **params)

    LOGGER.debug("Applied %s -> %r", operation_type, result)
    return result


def _resolve_references(operation: dict, bindings: Dict[str, Any]) -> dict:
    """Replace ``"@name"`` parameter values by earlier bound results."""
    resolved = {}
    for key, value in operation.items():
        if key not in _RESERVED_KEYS and isinstance(value, str) and value.startswith("@"):
            name = value[1:]
            if name not in bindings:
                raise ValueError(f"Unbound reference '{value}' in parameter '{key}'")
            value = bindings[name]
        resolved[key] = value
    return resolved


def apply_operations(
    graph: FloorGraph, operations: List[dict], validate: bool = False
) -> List[Dict[str, Any]]:
    """Apply a list of operations sequentially.

    A failing operation is reported and skipped; later operations still run.

    Args:
        graph: The graph store to modify in place.
        operations: List of operation dictionaries to apply.
        validate: Check floor invariants after each operation. A violating
            operation is rolled back and reported as failed.

    Returns:
        List of results for each operation, containing:
        - operation_index: Position of the operation in the list
        - operation: The operation as given
        - success: Whether the operation was applied
        - result: The operation's return value (None on failure)
        - error: Error message if the operation failed (optional)
    """
    bindings: Dict[str, Any] = {}
    results = []

    for i, operation in enumerate(operations):
        entry: Dict[str, Any] = {
            "operation_index": i,
            "operation": operation,
            "success": False,
            "result": None,
        }
        before = graph.floor.snapshot() if validate else None

        try:
            result = apply(graph, _resolve_references(operation, bindings))
            if validate:
                validate_all(graph.floor)
        except InvalidFloor as e:
            LOGGER.warning("Operation %d broke floor invariants, rolling back: %s", i, e)
            graph.restore(before)
            graph.commit()
            entry["error"] = str(e)
        except (InvalidOperation, ValueError) as e:
            LOGGER.warning("Operation %d failed: %s", i, e)
            entry["error"] = str(e)
        else:
            entry["success"] = True
            entry["result"] = result
            name: Optional[str] = operation.get("as")
            if name:
                bindings[name] = result

        results.append(entry)

    return results
