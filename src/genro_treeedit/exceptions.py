# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeEdit exceptions."""

from __future__ import annotations


class TreeEditError(Exception):
    """Base exception for tree editing errors."""

    pass


class NodeNotFoundError(TreeEditError, KeyError):
    """Raised in strict mode when an edit targets an id absent from the forest."""

    def __init__(self, node_id: str, operation: str | None = None) -> None:
        self.node_id = node_id
        self.operation = operation
        where = f" ({operation})" if operation else ''
        super().__init__(f"Node '{node_id}' not found{where}")

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable.
        return str(self.args[0])


class InvalidMoveError(TreeEditError):
    """Raised in strict mode when a move is rejected."""

    def __init__(self, dragged_id: str, target_id: str, reason: str) -> None:
        self.dragged_id = dragged_id
        self.target_id = target_id
        self.reason = reason
        super().__init__(
            f"Cannot move '{dragged_id}' under '{target_id}': {reason}"
        )


class InvalidLoadStateError(TreeEditError):
    """Raised in strict mode when a load transition starts from the wrong state."""

    pass


class DuplicateIdError(TreeEditError, ValueError):
    """Raised when a forest would contain the same id twice."""

    pass


class FetchError(TreeEditError):
    """Wraps a failure of the fetch capability while loading children."""

    def __init__(self, node_id: str, cause: BaseException) -> None:
        self.node_id = node_id
        self.cause = cause
        super().__init__(f"Loading children of '{node_id}' failed: {cause!r}")
