"""Exceptions raised by the in-memory device graph."""

from __future__ import annotations


class GraphError(Exception):
    """Base class for device graph misuse."""


class DuplicateChildError(GraphError):
    """Raised when a child browse name is already taken under a parent."""

    def __init__(self, parent: str, name: str) -> None:
        super().__init__(f"Node '{parent}' already has a child named '{name}'")
        self.parent = parent
        self.name = name


class NodeNotFoundError(GraphError):
    """Raised when a node id cannot be resolved in the graph."""


class NotAVariableError(GraphError):
    """Raised when a value is requested from an object node."""


__all__ = ["GraphError", "DuplicateChildError", "NodeNotFoundError", "NotAVariableError"]
