"""
Cursor - traversal-scoped position in a syntax tree.

A cursor pairs a node with its parent cursor, forming the ancestor chain of
the node currently being visited. Each cursor also owns a small message map:
values put there are read back by descendants through nearest-ancestor lookup.

Cursors are built fresh by every traversal and dropped when it returns.
Nodes never point at their parents; only cursors do.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from .dom import Kind, Node


class Cursor:
    """A node plus the chain of cursors above it."""

    __slots__ = ("node", "parent", "messages")

    def __init__(self, node: Node, parent: Cursor | None = None):
        self.node = node
        self.parent = parent
        self.messages: dict[str, Any] = {}

    @classmethod
    def from_path(cls, path: Iterable[Node]) -> Cursor | None:
        """Build a cursor chain from nodes ordered root first."""
        cursor = None
        for node in path:
            cursor = cls(node, cursor)
        return cursor

    def get_message(self, key: str, default: Any = None) -> Any:
        """Message set on this cursor only."""
        return self.messages.get(key, default)

    def nearest_message(self, key: str, default: Any = None) -> Any:
        """First value for key on this cursor or the nearest ancestor."""
        for cursor in self.chain():
            if key in cursor.messages:
                return cursor.messages[key]
        return default

    def put_message(self, key: str, value: Any) -> None:
        self.messages[key] = value

    def put_message_on_ancestor(self, kind: Kind, key: str, value: Any) -> bool:
        """
        Set a message on the nearest cursor (self included) holding a node of kind.
        Returns False if there is no such cursor.
        """
        cursor = self.first_enclosing(kind)
        if cursor is None:
            return False
        cursor.put_message(key, value)
        return True

    def first_enclosing(self, kind: Kind) -> Cursor | None:
        for cursor in self.chain():
            if cursor.node.kind is kind:
                return cursor
        return None

    def parent_or_none(self, levels: int = 1) -> Cursor | None:
        """Walk up `levels` parents; None when the chain is shorter."""
        cursor: Cursor | None = self
        for _ in range(levels):
            if cursor is None:
                return None
            cursor = cursor.parent
        return cursor

    def chain(self) -> Iterator[Cursor]:
        """Yield this cursor then each ancestor cursor, nearest first."""
        cursor: Cursor | None = self
        while cursor is not None:
            yield cursor
            cursor = cursor.parent

    def path(self) -> Iterator[Node]:
        """Yield nodes from this one up to the root."""
        for cursor in self.chain():
            yield cursor.node

    def root(self) -> Cursor:
        cursor = self
        while cursor.parent is not None:
            cursor = cursor.parent
        return cursor

    def __repr__(self) -> str:
        kinds = "/".join(node.kind.value for node in reversed(list(self.path())))
        return f"Cursor({kinds})"
