"""
Tests for the FormTree helpers and binding into a host sink.
"""

import pytest

from jsonform.builder import build_form
from jsonform.examples import build_example_checkout_schema
from jsonform.model import FieldDefinition
from jsonform.kinds import FieldKind
from jsonform.tree import ActionNode, FieldNode, FormTree, GroupNode, bind_tree


class RecordingSink:
    """Minimal host sink that records every call with its nesting path."""

    def __init__(self, path=(), calls=None):
        self.path = path
        self.calls = [] if calls is None else calls

    def add_field(self, name, kind, options):
        self.calls.append(("field", self.path, name, kind, options))

    def add_group(self, name, label, children):
        self.calls.append(("group", self.path, name, label))
        return RecordingSink(self.path + (name,), self.calls)

    def add_action(self, name, kind, options):
        self.calls.append(("action", self.path, name, kind, options))


class FlatSink(RecordingSink):
    """A host that renders group children itself."""

    def add_group(self, name, label, children):
        self.calls.append(("group", self.path, name, label))
        return None


def sample_tree():
    age = FieldDefinition(name="age", kind=FieldKind.INTEGER, label="Age", default_value=3)
    return FormTree(slug="f", children=[
        GroupNode(name="s1", label="S1", children=[
            GroupNode(name="c1", label="C1", children=[FieldNode(age)]),
            ActionNode(label="Next"),
        ]),
    ])


class TestBinding:
    """Test bind_tree."""

    def test_calls_in_tree_order(self):
        sink = bind_tree(sample_tree(), RecordingSink())
        assert sink.calls == [
            ("group", (), "s1", "S1"),
            ("group", ("s1",), "c1", "C1"),
            ("field", ("s1", "c1"), "age", "integer", {"label": "Age", "required": False, "data": 3}),
            ("action", ("s1",), "submit", "submit", {"label": "Next", "attr": {}}),
        ]

    def test_group_without_child_sink(self):
        sink = bind_tree(sample_tree(), FlatSink())
        assert [c[0] for c in sink.calls] == ["group"]

    def test_unknown_node_type(self):
        with pytest.raises(TypeError):
            bind_tree(FormTree(slug="f", children=["bogus"]), RecordingSink())

    def test_example_form_binds_every_field(self):
        tree = build_form(build_example_checkout_schema(), {})
        sink = bind_tree(tree, RecordingSink())
        bound = [c[2] for c in sink.calls if c[0] == "field"]
        assert bound == tree.field_names()


class TestTreeHelpers:
    """Test lookups on FormTree."""

    def test_find_field(self):
        tree = sample_tree()
        assert tree.find_field("age").default_value == 3
        assert tree.find_field("missing") is None

    def test_actions(self):
        assert [a.label for a in sample_tree().actions()] == ["Next"]

    def test_field_node_name(self):
        assert FieldNode(FieldDefinition(name="x", kind=FieldKind.TEXT, label="X")).name == "x"
