"""
DOM - lossless syntax tree for yindent

Every parsed document becomes a tree of Nodes. Each node owns the exact text
that preceded it in the source (its prefix) plus its own text, so printing the
tree in order reproduces the input byte for byte.

Key invariant: nodes are compared by identity. Two scalars with the same text
are still different nodes, which is what the stop gate relies on.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import Enum


class Kind(Enum):
    """Closed set of node kinds."""
    STREAM = "stream"
    DOCUMENT = "document"
    DOCUMENT_END = "document_end"
    MAPPING = "mapping"
    MAPPING_ENTRY = "mapping_entry"
    SEQUENCE = "sequence"
    SEQUENCE_ENTRY = "sequence_entry"
    SCALAR = "scalar"


@dataclass(eq=False)
class Node:
    """A node in the syntax tree."""
    kind: Kind
    prefix: str = ""
    text: str = ""  # scalar value, "-" marker, ":" indicator, "---" / "..."
    children: list[Node] = field(default_factory=list)

    @property
    def is_collection(self) -> bool:
        return self.kind in (Kind.MAPPING, Kind.SEQUENCE)

    def depth_first(self) -> Iterator[Node]:
        """Traverse tree depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.depth_first()

    def add_child(self, child: Node) -> Node:
        """Add a child node and return it for chaining."""
        self.children.append(child)
        return child

    def with_prefix(self, prefix: str) -> Node:
        """Return self if unchanged, else a copy carrying the new prefix."""
        if prefix == self.prefix:
            return self
        return replace(self, prefix=prefix)

    def with_children(self, children: list[Node]) -> Node:
        if all(a is b for a, b in zip(children, self.children, strict=True)):
            return self
        return replace(self, children=children)


def to_text(node: Node) -> str:
    """Print a tree back to source text."""
    out: list[str] = []
    _write(node, out)
    return "".join(out)


def _write(node: Node, out: list[str]) -> None:
    out.append(node.prefix)
    if node.kind is Kind.MAPPING_ENTRY:
        # key, then the ':' indicator, then the value
        key, value = node.children
        _write(key, out)
        out.append(node.text)
        _write(value, out)
        return
    out.append(node.text)
    for child in node.children:
        _write(child, out)


def find_entry(root: Node, key: str) -> Node | None:
    """Find the first mapping entry whose key has the given text."""
    for node in root.depth_first():
        if node.kind is Kind.MAPPING_ENTRY and node.children[0].text == key:
            return node
    return None
