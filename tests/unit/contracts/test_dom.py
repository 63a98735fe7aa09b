"""
Tier 0: Data Model Contract Tests

These tests pin down the syntax tree contract the parser, the printer and the
indentation pass all rely on.
"""

from yindent.dom import Kind, Node, find_entry, to_text


def _entry(key: str, value: Node, prefix: str = "") -> Node:
    return Node(Kind.MAPPING_ENTRY, prefix=prefix, text=":",
                children=[Node(Kind.SCALAR, text=key), value])


class TestNodeCreation:
    def test_defaults(self):
        node = Node(Kind.SCALAR)
        assert node.prefix == ""
        assert node.text == ""
        assert node.children == []

    def test_children_are_not_shared(self):
        a = Node(Kind.MAPPING)
        b = Node(Kind.MAPPING)
        a.add_child(Node(Kind.SCALAR, text="x"))
        assert b.children == []

    def test_add_child_returns_child(self):
        parent = Node(Kind.SEQUENCE)
        child = Node(Kind.SEQUENCE_ENTRY, text="-")
        assert parent.add_child(child) is child
        assert parent.children == [child]

    def test_is_collection(self):
        assert Node(Kind.MAPPING).is_collection
        assert Node(Kind.SEQUENCE).is_collection
        assert not Node(Kind.SEQUENCE_ENTRY).is_collection
        assert not Node(Kind.SCALAR).is_collection


class TestIdentity:
    def test_equal_text_is_not_equal_node(self):
        assert Node(Kind.SCALAR, text="a") != Node(Kind.SCALAR, text="a")

    def test_node_equals_itself(self):
        node = Node(Kind.SCALAR, text="a")
        assert node == node


class TestCopies:
    def test_with_same_prefix_returns_self(self):
        node = Node(Kind.SCALAR, prefix=" ", text="a")
        assert node.with_prefix(" ") is node

    def test_with_new_prefix_copies(self):
        node = Node(Kind.SCALAR, prefix=" ", text="a")
        copy = node.with_prefix("\n  ")
        assert copy is not node
        assert copy.prefix == "\n  "
        assert copy.text == "a"
        assert node.prefix == " "

    def test_with_same_children_returns_self(self):
        child = Node(Kind.SCALAR, text="a")
        node = Node(Kind.SEQUENCE_ENTRY, text="-", children=[child])
        assert node.with_children([child]) is node

    def test_with_new_children_copies(self):
        child = Node(Kind.SCALAR, text="a")
        node = Node(Kind.SEQUENCE_ENTRY, text="-", children=[child])
        other = Node(Kind.SCALAR, text="b")
        copy = node.with_children([other])
        assert copy.children == [other]
        assert node.children == [child]


class TestTraversal:
    def test_depth_first_order(self):
        tree = Node(Kind.MAPPING, children=[
            _entry("a", Node(Kind.SCALAR, prefix=" ", text="1")),
            _entry("b", Node(Kind.SCALAR, prefix=" ", text="2"), prefix="\n"),
        ])
        kinds = [n.kind for n in tree.depth_first()]
        assert kinds == [
            Kind.MAPPING,
            Kind.MAPPING_ENTRY, Kind.SCALAR, Kind.SCALAR,
            Kind.MAPPING_ENTRY, Kind.SCALAR, Kind.SCALAR,
        ]

    def test_find_entry(self):
        b = _entry("b", Node(Kind.SCALAR, prefix=" ", text="2"), prefix="\n")
        tree = Node(Kind.MAPPING, children=[_entry("a", Node(Kind.SCALAR)), b])
        assert find_entry(tree, "b") is b
        assert find_entry(tree, "c") is None


class TestPrinter:
    def test_mapping_entry_prints_key_indicator_value(self):
        tree = Node(Kind.MAPPING, children=[
            _entry("a", Node(Kind.SCALAR, prefix=" ", text="1")),
            _entry("b", Node(Kind.SCALAR, prefix=" ", text="2"), prefix="\n"),
        ])
        assert to_text(tree) == "a: 1\nb: 2"

    def test_sequence_entry_prints_marker_then_value(self):
        tree = Node(Kind.SEQUENCE, children=[
            Node(Kind.SEQUENCE_ENTRY, text="-", children=[Node(Kind.SCALAR, prefix=" ", text="x")]),
            Node(Kind.SEQUENCE_ENTRY, prefix="\n  # c\n", text="-",
                 children=[Node(Kind.SCALAR, prefix=" ", text="y")]),
        ])
        assert to_text(tree) == "- x\n  # c\n- y"

    def test_document_markers(self):
        doc = Node(Kind.DOCUMENT, prefix="# top\n", text="---", children=[
            Node(Kind.SCALAR, prefix="\n", text="hello"),
            Node(Kind.DOCUMENT_END, prefix="\n", text="..."),
        ])
        assert to_text(Node(Kind.STREAM, children=[doc])) == "# top\n---\nhello\n..."
