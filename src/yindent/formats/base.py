"""
Base format interface and registry.

Each format strategy turns source text of one file type into a lossless tree
and prints that tree back. The registry manages format detection and selection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..dom import Node


class FormatStrategy(ABC):
    """Base class for file format handlers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name."""
        ...

    @property
    @abstractmethod
    def extensions(self) -> list[str]:
        """File extensions this format handles (e.g., ['.yaml', '.yml'])."""
        ...

    def detect(self, content: str) -> bool:
        """
        Magic detection: returns True if content looks like this format.
        Default implementation returns False (rely on extension only).
        """
        return False

    @abstractmethod
    def parse(self, content: str) -> Node:
        """
        Parse content into a lossless tree.
        Returns the root node of the tree.
        """
        ...

    @abstractmethod
    def render(self, node: Node) -> str:
        """Print a tree produced by parse() back to text."""
        ...


class FormatRegistry:
    """Strategies by name and by extension, plus content sniffing for stdin."""

    def __init__(self):
        self._strategies: dict[str, FormatStrategy] = {}

    def register(self, strategy: FormatStrategy) -> None:
        self._strategies[strategy.name] = strategy

    def lookup(self, key: str) -> FormatStrategy | None:
        """Strategy for a --type value: a format name or an extension."""
        key = key.lower()
        if key in self._strategies:
            return self._strategies[key]
        ext = key if key.startswith(".") else "." + key
        for strategy in self._strategies.values():
            if ext in strategy.extensions:
                return strategy
        return None

    def detect(self, content: str, filename: str | None = None) -> FormatStrategy | None:
        """By file extension when there is one, otherwise by content."""
        if filename and "." in filename:
            strategy = self.lookup("." + filename.rsplit(".", 1)[-1])
            if strategy:
                return strategy
        for strategy in self._strategies.values():
            if strategy.detect(content):
                return strategy
        return None


registry = FormatRegistry()
