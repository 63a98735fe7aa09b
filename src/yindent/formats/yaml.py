"""
YAML format strategy.

Parses block-style YAML into a lossless tree: every byte of the input ends up
in some node's prefix or text, so render(parse(s)) == s.

Supported: document markers, block mappings (plain or quoted keys), block
sequences including compact (`key:\\n- x`) and nested (`- - x`) forms,
single-line scalars of any style, flow collections on one line, comments and
blank lines. Anything else raises YamlSyntaxError.
"""

from __future__ import annotations

import logging
import re

from ..dom import Kind, Node, to_text
from .base import FormatStrategy, registry

logger = logging.getLogger(__name__)

# First content line that looks like `key:` or `key: value`
KEY_LINE_PATTERN = re.compile(r"^[\w\"'./-][^#\n]*?:(\s|$)", re.MULTILINE)

_BREAKS = "\r\n"
_SPACE = " \t"


class YamlSyntaxError(ValueError):
    """Input falls outside the supported YAML subset."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None,
                 hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.hint = hint

    def __str__(self) -> str:
        loc = ""
        if self.line:
            loc += f"{self.line}:"
        if self.column:
            loc += f"{self.column}:"
        text = f"{loc} {self.message}" if loc else self.message
        if self.hint:
            text += f" ({self.hint})"
        return text


class _Parser:
    """Recursive descent over indentation columns."""

    def __init__(self, text: str):
        self.s = text
        self.n = len(text)
        self.i = 0

    # -- positions -----------------------------------------------------

    def _line_start(self, pos: int) -> int:
        return max(self.s.rfind("\n", 0, pos), self.s.rfind("\r", 0, pos)) + 1

    def _line_end(self, pos: int) -> int:
        while pos < self.n and self.s[pos] not in _BREAKS:
            pos += 1
        return pos

    def _column(self, pos: int) -> int:
        start = self._line_start(pos)
        run = self.s[start:pos]
        if "\t" in run and not run.strip(_SPACE):
            raise self._error("tabs are not allowed in indentation", pos,
                              hint="indent with spaces")
        return pos - start

    def _error(self, message: str, pos: int, hint: str | None = None) -> YamlSyntaxError:
        line = self.s.count("\n", 0, pos) + 1
        column = pos - self._line_start(pos) + 1
        return YamlSyntaxError(message, line=line, column=column, hint=hint)

    def _has_break(self, start: int, end: int) -> bool:
        return any(c in _BREAKS for c in self.s[start:end])

    def _skip(self, pos: int) -> int:
        """Skip whitespace, line breaks and comments; return the next token position."""
        while pos < self.n:
            c = self.s[pos]
            if c in _SPACE or c in _BREAKS:
                pos += 1
            elif c == "#":
                pos = self._line_end(pos)
            else:
                break
        return pos

    # -- token shapes ----------------------------------------------------

    def _is_marker(self, pos: int) -> bool:
        """A `-` sequence entry indicator."""
        return (self.s.startswith("-", pos)
                and (pos + 1 == self.n or self.s[pos + 1] in _SPACE + _BREAKS))

    def _is_document_marker(self, pos: int, marker: str = "") -> bool:
        markers = (marker,) if marker else ("---", "...")
        for m in markers:
            end = pos + len(m)
            if (self.s.startswith(m, pos) and pos == self._line_start(pos)
                    and (end == self.n or self.s[end] in _SPACE + _BREAKS)):
                return True
        return False

    def _quoted_end(self, pos: int, end: int) -> int | None:
        """End of a quoted scalar starting at pos, or None if it is not closed on this line."""
        quote = self.s[pos]
        j = pos + 1
        while j < end:
            c = self.s[j]
            if quote == "'" and c == "'":
                if j + 1 < end and self.s[j + 1] == "'":
                    j += 2
                    continue
                return j + 1
            if quote == '"':
                if c == "\\":
                    j += 2
                    continue
                if c == '"':
                    return j + 1
            j += 1
        return None

    def _key_end(self, pos: int) -> int | None:
        """Position of the `:` indicator if a mapping key starts at pos."""
        end = self._line_end(pos)
        c = self.s[pos]
        if c in "[{|>#" or self._is_marker(pos) or self._is_document_marker(pos):
            return None
        j = pos
        if c in "\"'":
            j = self._quoted_end(pos, end)
            if j is None:
                return None
        while j < end:
            c = self.s[j]
            if c == ":" and (j + 1 == self.n or self.s[j + 1] in _SPACE + _BREAKS):
                return j if j > pos else None
            if c == "#" and j > pos and self.s[j - 1] in _SPACE:
                return None
            j += 1
        return None

    def _scalar_end(self, pos: int) -> int:
        end = self._line_end(pos)
        first = self.s[pos]
        if first in "|>":
            raise self._error("block scalars are not supported", pos,
                              hint="use a quoted single-line scalar")
        j = pos
        if first in "\"'":
            j = self._quoted_end(pos, end)
            if j is None:
                raise self._error("multi-line quoted scalars are not supported", pos)
        flow = first in "[{"
        depth = 0
        while j < end:
            c = self.s[j]
            if c == "#" and j > pos and self.s[j - 1] in _SPACE:
                break
            if flow and c in "\"'":
                closed = self._quoted_end(j, end)
                if closed is None:
                    raise self._error("multi-line quoted scalars are not supported", j)
                j = closed
                continue
            if flow and c in "[{":
                depth += 1
            elif flow and c in "]}":
                depth -= 1
            j += 1
        if flow and depth > 0:
            raise self._error("multi-line flow collections are not supported", pos)
        while j > pos and self.s[j - 1] in _SPACE:
            j -= 1
        return j

    # -- productions -----------------------------------------------------

    def parse_stream(self) -> Node:
        stream = Node(Kind.STREAM)
        while True:
            stream.add_child(self._document())
            if self.i >= self.n:
                break
        return stream

    def _document(self) -> Node:
        start = self.i
        pos = self._skip(start)
        doc = Node(Kind.DOCUMENT, prefix=self.s[start:pos])
        self.i = pos
        if self._is_document_marker(pos, "---"):
            doc.text = "---"
            self.i = pos + 3

        block_start = self.i
        pos = self._skip(block_start)
        if pos < self.n and not self._is_document_marker(pos):
            doc.add_child(self._block(self.s[block_start:pos], pos))

        end_start = self.i
        pos = self._skip(end_start)
        doc_end = Node(Kind.DOCUMENT_END, prefix=self.s[end_start:pos])
        if self._is_document_marker(pos, "..."):
            doc_end.text = "..."
            self.i = pos + 3
        elif pos >= self.n or self._is_document_marker(pos, "---"):
            self.i = pos
        else:
            raise self._error("unexpected content", pos,
                              hint="check the indentation of this line")
        doc.add_child(doc_end)
        return doc

    def _block(self, prefix: str, pos: int) -> Node:
        if self._is_marker(pos):
            return self._sequence(prefix, pos)
        if self._key_end(pos) is not None:
            return self._mapping(prefix, pos)
        return self._scalar(prefix, pos)

    def _scalar(self, prefix: str, pos: int) -> Node:
        end = self._scalar_end(pos)
        self.i = end
        return Node(Kind.SCALAR, prefix=prefix, text=self.s[pos:end])

    def _sequence(self, prefix: str, pos: int) -> Node:
        col = self._column(pos)
        seq = Node(Kind.SEQUENCE)
        while True:
            self.i = pos + 1
            value = self._value_after(col, after_key=False)
            seq.add_child(Node(Kind.SEQUENCE_ENTRY, prefix=prefix, text="-", children=[value]))

            nxt = self._skip(self.i)
            if (nxt < self.n and self._has_break(self.i, nxt)
                    and self._column(nxt) == col and self._is_marker(nxt)):
                prefix = self.s[self.i:nxt]
                pos = nxt
                continue
            return seq

    def _mapping(self, prefix: str, pos: int) -> Node:
        col = self._column(pos)
        mapping = Node(Kind.MAPPING)
        while True:
            colon = self._key_end(pos)
            assert colon is not None
            key_end = colon
            while key_end > pos and self.s[key_end - 1] in _SPACE:
                key_end -= 1
            key = Node(Kind.SCALAR, text=self.s[pos:key_end])
            self.i = colon + 1
            value = self._value_after(col, after_key=True)
            mapping.add_child(Node(Kind.MAPPING_ENTRY, prefix=prefix,
                                   text=self.s[key_end:colon + 1], children=[key, value]))

            nxt = self._skip(self.i)
            if (nxt < self.n and self._has_break(self.i, nxt)
                    and self._column(nxt) == col and self._key_end(nxt) is not None):
                prefix = self.s[self.i:nxt]
                pos = nxt
                continue
            return mapping

    def _value_after(self, owner_col: int, after_key: bool) -> Node:
        """Value following a `-` or `:` indicator; an empty scalar if there is none."""
        start = self.i
        pos = self._skip(start)
        prefix = self.s[start:pos]
        if pos < self.n and not self._is_document_marker(pos):
            if not self._has_break(start, pos):
                if after_key:
                    return self._scalar(prefix, pos)
                return self._block(prefix, pos)
            col = self._column(pos)
            if col > owner_col:
                return self._block(prefix, pos)
            if col == owner_col and after_key:
                if self._is_marker(pos):
                    return self._block(prefix, pos)
                if self._key_end(pos) is None:
                    # value on the next line at the key's own column
                    return self._scalar(prefix, pos)
        self.i = start
        return Node(Kind.SCALAR)


def parse(content: str) -> Node:
    """Parse YAML text into a STREAM tree."""
    tree = _Parser(content).parse_stream()
    logger.debug("parsed %d document(s), %d chars", len(tree.children), len(content))
    return tree


class YamlStrategy(FormatStrategy):
    """Lossless block-style YAML."""

    @property
    def name(self) -> str:
        return "yaml"

    @property
    def extensions(self) -> list[str]:
        return [".yaml", ".yml"]

    def detect(self, content: str) -> bool:
        """Looks like YAML if it opens a document or starts with a `key:` line."""
        for line in content.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if stripped == "---" or stripped.startswith("--- ") or stripped.startswith("- "):
                return True
            return KEY_LINE_PATTERN.match(stripped) is not None
        return False

    def parse(self, content: str) -> Node:
        return parse(content)

    def render(self, node: Node) -> str:
        return to_text(node)


# Register the strategy
registry.register(YamlStrategy())
