"""
Indentation normalization for YAML syntax trees.

A single depth-first pass rewrites node prefixes so every line that starts a
node sits on a multiple of the configured indent size relative to its owner:

    a:                 a:
    -   1        ->      - 1
    -   2                - 2

State flows through cursors. Entries store the column their children indent
from (`last_indent`) on their own cursor; sequence entries additionally hand
the column shared by all entries of one sequence (`sequence_entry_indent`) to
the next sibling. A stop flag on the enclosing document cursor lets a caller
format only up to a given node.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .config import IndentsStyle, get_config
from .cursor import Cursor
from .dom import Kind, Node

logger = logging.getLogger(__name__)

LAST_INDENT = "last_indent"
SEQUENCE_ENTRY_INDENT = "sequence_entry_indent"
STOP = "stop"

# A line break followed by horizontal whitespace and a comment
COMMENT_LINE_PATTERN = re.compile(r"(\r\n|\r|\n)[^\S\r\n]*#")

# Whitespace before a comment that opens a document on its first line
LEADING_COMMENT_PATTERN = re.compile(r"^[^\S\r\n]*#")

Carry = Mapping[str, Any]


def has_break(prefix: str) -> bool:
    return "\n" in prefix or "\r" in prefix


def find_indent(prefix: str) -> int:
    """Width of the whitespace run after the last line break."""
    tail = prefix[max(prefix.rfind("\n"), prefix.rfind("\r")) + 1:]
    return len(tail) - len(tail.lstrip(" \t"))


def realign_comments(prefix: str, column: int, document: bool = False) -> str:
    """Put every comment that starts a line of prefix at column."""
    if "#" not in prefix:
        return prefix
    pad = " " * column
    prefix = COMMENT_LINE_PATTERN.sub(lambda m: m.group(1) + pad + "#", prefix)
    if document:
        prefix = LEADING_COMMENT_PATTERN.sub("#", prefix, count=1)
    return prefix


def indent_to(prefix: str, column: int) -> str:
    """Move the line a prefix ends on to column, comments included."""
    if not has_break(prefix):
        return prefix

    indent = find_indent(prefix)
    prefix = realign_comments(prefix, column)
    tail_start = max(prefix.rfind("\n"), prefix.rfind("\r")) + 1
    if prefix[tail_start:].strip(" \t"):
        # prefix ends inside a comment, there is no run to shift
        return prefix

    shift = column - indent
    if shift > 0:
        prefix += " " * shift
    elif shift < 0:
        prefix = prefix[:shift]
    return prefix


def first_content_prefix(entry: Node) -> str:
    """
    Prefix of the first node below entry that carries content of its own.

    Collections and nested sequence entries are looked through, so for
    `- - a` and `- a: 1` this is the whitespace in front of `a`.
    """
    for node in entry.depth_first():
        if node is entry:
            continue
        if node.is_collection or node.kind is Kind.SEQUENCE_ENTRY:
            continue
        return node.prefix
    return ""


def resolve_baseline(cursor: Cursor | None) -> int:
    """
    Indent column in effect at cursor.

    The nearest explicit `last_indent` wins. A cursor without one whose node
    starts a line at a non-zero column answers with that column, which is
    recorded there for later lookups.
    """
    if cursor is None:
        return 0
    for c in cursor.chain():
        indent = c.get_message(LAST_INDENT)
        if indent is not None:
            return indent
        prefix = c.node.prefix
        if has_break(prefix):
            indent = find_indent(prefix)
            if indent != 0:
                c.put_message(LAST_INDENT, indent)
                return indent
    return 0


def _opening_entry(entry: Node) -> Node | None:
    """First entry of a sequence that is entry's own value, as in `- - a`."""
    if not entry.children:
        return None
    value = entry.children[0]
    if value.kind is Kind.SEQUENCE and value.children:
        return value.children[0]
    return None


def _with_single_space(node: Node) -> Node:
    """Collapse the gap in front of the first token on a marker line to one space."""
    if node.is_collection and node.children:
        first = _with_single_space(node.children[0])
        return node.with_children([first, *node.children[1:]])
    if node.prefix and not has_break(node.prefix):
        return node.with_prefix(" ")
    return node


class IndentsVisitor:
    """Rewrites prefixes of one tree; create one per traversal."""

    def __init__(self, style: IndentsStyle, stop_after: Node | None = None):
        self.style = style
        self.stop_after = stop_after

    def visit(self, tree: Node, ancestors: Sequence[Node] = ()) -> Node:
        """
        Reindent tree.

        ancestors are the nodes above tree, root first, when only a subtree is
        being formatted; their prefixes seed the indent baseline.
        """
        parent = Cursor.from_path(ancestors)
        if parent is not None:
            resolve_baseline(parent)
        result, _ = self._visit(tree, parent, {})
        return result

    def _visit(self, node: Node, parent: Cursor | None, carry: Carry) -> tuple[Node, Carry]:
        if parent is not None and parent.nearest_message(STOP, False):
            return node, carry

        cursor = Cursor(node, parent)
        y, carry = self._pre_visit(node, cursor, carry)
        if y.prefix != node.prefix:
            logger.debug("%s prefix %r -> %r", node.kind.value, node.prefix, y.prefix)
        cursor.node = y

        children = []
        sibling: Carry = {}
        for child in y.children:
            child, sibling = self._visit(child, cursor, sibling)
            children.append(child)
        y = y.with_children(children)

        self._post_visit(node, cursor)
        return y, carry

    def _post_visit(self, node: Node, cursor: Cursor) -> None:
        if self.stop_after is None or node is not self.stop_after:
            return
        if not cursor.put_message_on_ancestor(Kind.DOCUMENT, STOP, True):
            cursor.root().put_message(STOP, True)
        logger.debug("stopping after %s", node.kind.value)

    def _pre_visit(self, y: Node, cursor: Cursor, carry: Carry) -> tuple[Node, Carry]:
        indent = resolve_baseline(cursor.parent)
        return _HANDLERS[y.kind](self, y, cursor, indent, carry)

    def _is_unindented_top_level(self, cursor: Cursor) -> bool:
        for level in (1, 2):
            ancestor = cursor.parent_or_none(level)
            if ancestor is not None and ancestor.node.kind is Kind.DOCUMENT:
                return True
        return False

    def _sequence_entry(self, y: Node, cursor: Cursor, indent: int,
                        carry: Carry) -> tuple[Node, Carry]:
        step = self.style.indent_size
        top = self._is_unindented_top_level(cursor)
        if has_break(y.prefix) and not top:
            indent = carry.get(SEQUENCE_ENTRY_INDENT, indent)
            column = indent + step
            y = y.with_prefix(indent_to(y.prefix, column))
            carry = {SEQUENCE_ENTRY_INDENT: indent}
        elif has_break(y.prefix):
            column = find_indent(y.prefix)
            y = y.with_prefix(realign_comments(y.prefix, column))
        elif top:
            column = indent
        else:
            # `- - a`: the parent recorded its content column minus one step
            column = indent + step

        if self.style.normalize_marker_spacing and y.children:
            y = y.with_children([_with_single_space(y.children[0])])

        inner = _opening_entry(y)
        if inner is not None:
            # entries of a nested sequence line up under its first marker
            first = inner.prefix
        else:
            first = first_content_prefix(y)
        if first and not has_break(first):
            # the +1 is for the '-' character; a block opened on this line aligns with its first token
            content = column + len(first) + 1
            cursor.put_message(LAST_INDENT, content - step)
        else:
            cursor.put_message(LAST_INDENT, column)
        return y, carry

    def _mapping_entry(self, y: Node, cursor: Cursor, indent: int,
                       carry: Carry) -> tuple[Node, Carry]:
        step = self.style.indent_size
        top = self._is_unindented_top_level(cursor)
        if has_break(y.prefix) and not top:
            column = indent + step
            y = y.with_prefix(indent_to(y.prefix, column))
        elif has_break(y.prefix):
            column = find_indent(y.prefix)
            y = y.with_prefix(realign_comments(y.prefix, column))
        elif self._opens_sequence_entry(cursor):
            # a mapping entry that begins a sequence entry, anything below it is indented further:
            #
            # - key:
            #     value
            column = indent + step
        elif top:
            column = indent
        else:
            y = y.with_prefix(realign_comments(y.prefix, indent))
            column = indent + step
        cursor.put_message(LAST_INDENT, column)
        return y, carry

    def _opens_sequence_entry(self, cursor: Cursor) -> bool:
        grandparent = cursor.parent_or_none(2)
        return grandparent is not None and grandparent.node.kind is Kind.SEQUENCE_ENTRY

    def _document(self, y: Node, cursor: Cursor, indent: int,
                  carry: Carry) -> tuple[Node, Carry]:
        return y.with_prefix(realign_comments(y.prefix, 0, document=True)), carry

    def _other(self, y: Node, cursor: Cursor, indent: int,
               carry: Carry) -> tuple[Node, Carry]:
        if not has_break(y.prefix):
            return y, carry
        if self._is_unindented_top_level(cursor):
            return y.with_prefix(realign_comments(y.prefix, find_indent(y.prefix))), carry
        # a value on a continuation line sits one step inside its owner
        return y.with_prefix(indent_to(y.prefix, indent + self.style.indent_size)), carry


Handler = Callable[[IndentsVisitor, Node, Cursor, int, Carry], tuple[Node, Carry]]

_HANDLERS: dict[Kind, Handler] = {
    Kind.STREAM: IndentsVisitor._other,
    Kind.DOCUMENT: IndentsVisitor._document,
    Kind.DOCUMENT_END: IndentsVisitor._other,
    Kind.MAPPING: IndentsVisitor._other,
    Kind.MAPPING_ENTRY: IndentsVisitor._mapping_entry,
    Kind.SEQUENCE: IndentsVisitor._other,
    Kind.SEQUENCE_ENTRY: IndentsVisitor._sequence_entry,
    Kind.SCALAR: IndentsVisitor._other,
}


def reindent(
    tree: Node,
    style: IndentsStyle | None = None,
    stop_after: Node | None = None,
    ancestors: Sequence[Node] = (),
) -> Node:
    """
    Normalize the indentation of tree.

    Args:
        tree: Root of the tree (or subtree) to format
        style: Indent settings; the configured style when omitted
        stop_after: Leave everything after this node (by identity) in its document untouched
        ancestors: Nodes above tree, root first, when formatting a subtree

    Returns:
        A tree of the same shape differing only in prefixes
    """
    if style is None:
        style = get_config().indents
    return IndentsVisitor(style, stop_after).visit(tree, ancestors)
