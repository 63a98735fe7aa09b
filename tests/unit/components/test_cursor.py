"""
Unit tests for the cursor stack.
"""

from yindent.cursor import Cursor
from yindent.dom import Kind, Node


def _chain() -> tuple[Cursor, Cursor, Cursor, Cursor]:
    doc = Cursor(Node(Kind.DOCUMENT))
    mapping = Cursor(Node(Kind.MAPPING), doc)
    entry = Cursor(Node(Kind.MAPPING_ENTRY, text=":"), mapping)
    scalar = Cursor(Node(Kind.SCALAR, text="v"), entry)
    return doc, mapping, entry, scalar


class TestMessages:
    def test_missing_key_returns_default(self):
        _, _, _, scalar = _chain()
        assert scalar.nearest_message("last_indent", 0) == 0
        assert scalar.nearest_message("last_indent") is None

    def test_nearest_ancestor_wins(self):
        doc, _, entry, scalar = _chain()
        doc.put_message("last_indent", 2)
        entry.put_message("last_indent", 4)
        assert scalar.nearest_message("last_indent") == 4

    def test_put_message_is_local(self):
        _, mapping, entry, _ = _chain()
        entry.put_message("last_indent", 4)
        assert entry.get_message("last_indent") == 4
        assert mapping.nearest_message("last_indent") is None

    def test_siblings_do_not_see_each_other(self):
        _, mapping, entry, _ = _chain()
        sibling = Cursor(Node(Kind.MAPPING_ENTRY, text=":"), mapping)
        entry.put_message("last_indent", 4)
        assert sibling.nearest_message("last_indent") is None

    def test_falsy_values_are_found(self):
        doc, _, _, scalar = _chain()
        doc.put_message("last_indent", 0)
        assert scalar.nearest_message("last_indent", 9) == 0

    def test_put_message_on_ancestor(self):
        doc, _, _, scalar = _chain()
        assert scalar.put_message_on_ancestor(Kind.DOCUMENT, "stop", True)
        assert doc.get_message("stop") is True
        assert scalar.nearest_message("stop") is True

    def test_put_message_on_ancestor_includes_self(self):
        doc, _, _, _ = _chain()
        assert doc.put_message_on_ancestor(Kind.DOCUMENT, "stop", True)
        assert doc.get_message("stop") is True

    def test_put_message_on_missing_ancestor(self):
        _, _, _, scalar = _chain()
        assert not scalar.put_message_on_ancestor(Kind.STREAM, "stop", True)
        assert scalar.nearest_message("stop") is None


class TestNavigation:
    def test_parent_or_none(self):
        doc, mapping, entry, scalar = _chain()
        assert scalar.parent_or_none() is entry
        assert scalar.parent_or_none(2) is mapping
        assert scalar.parent_or_none(3) is doc
        assert scalar.parent_or_none(4) is None
        assert scalar.parent_or_none(9) is None

    def test_first_enclosing(self):
        _, mapping, _, scalar = _chain()
        assert scalar.first_enclosing(Kind.MAPPING) is mapping
        assert scalar.first_enclosing(Kind.SEQUENCE) is None

    def test_path_is_nearest_first(self):
        _, _, _, scalar = _chain()
        kinds = [node.kind for node in scalar.path()]
        assert kinds == [Kind.SCALAR, Kind.MAPPING_ENTRY, Kind.MAPPING, Kind.DOCUMENT]

    def test_root(self):
        doc, _, _, scalar = _chain()
        assert scalar.root() is doc

    def test_from_path(self):
        nodes = [Node(Kind.DOCUMENT), Node(Kind.MAPPING), Node(Kind.MAPPING_ENTRY)]
        cursor = Cursor.from_path(nodes)
        assert cursor is not None
        assert list(cursor.path()) == list(reversed(nodes))

    def test_from_empty_path(self):
        assert Cursor.from_path([]) is None

    def test_repr_shows_kinds_root_first(self):
        _, _, _, scalar = _chain()
        assert repr(scalar) == "Cursor(document/mapping/mapping_entry/scalar)"
