"""
Form tree output.

The builder emits an intermediate tree rather than touching any widget
API. A host rendering layer consumes it through the FormSink protocol:

    add_field(name, kind, options)
    add_group(name, label, children) -> sink for the group's children
    add_action(name, kind, options)

bind_tree() replays a FormTree into such a sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol, Union

from jsonform.model import FieldDefinition


@dataclass
class FieldNode:
    """Leaf node wrapping one resolved field."""

    definition: FieldDefinition

    @property
    def name(self) -> str:
        return self.definition.name


@dataclass
class ActionNode:
    """Submit button."""

    name: str = "submit"
    kind: str = "submit"
    label: str = "Send"
    attr: Dict[str, Any] = field(default_factory=dict)

    def to_options(self) -> Dict[str, Any]:
        return {"label": self.label, "attr": dict(self.attr)}


@dataclass
class GroupNode:
    """
    Section or category.

    options carries display metadata only (attr, label_attr and
    inherit_data=True); groups never own data.
    """

    name: str
    label: str
    children: List["TreeNode"] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)


TreeNode = Union[GroupNode, FieldNode, ActionNode]


@dataclass
class FormTree:
    """
    Result of one build.

    Properties:
        slug: Schema slug
        children: Section groups, then the default submit action if any
        data: Flat data context after question defaults were seeded
        has_explicit_submit: True if some section declared its own submit
    """

    slug: str
    children: List[TreeNode] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    has_explicit_submit: bool = False

    def iter_fields(self) -> Iterator[FieldDefinition]:
        """Yield every included field, depth first in tree order."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if isinstance(node, FieldNode):
                yield node.definition
            elif isinstance(node, GroupNode):
                stack.extend(reversed(node.children))

    def field_names(self) -> List[str]:
        return [f.name for f in self.iter_fields()]

    def find_field(self, name: str) -> Optional[FieldDefinition]:
        for definition in self.iter_fields():
            if definition.name == name:
                return definition
        return None

    def actions(self) -> List[ActionNode]:
        """Every submit action, section-level ones first, in tree order."""
        found: List[ActionNode] = []

        def walk(nodes):
            for node in nodes:
                if isinstance(node, ActionNode):
                    found.append(node)
                elif isinstance(node, GroupNode):
                    walk(node.children)

        walk(self.children)
        return found


class FormSink(Protocol):
    """What a host form framework implements to receive a FormTree."""

    def add_field(self, name: str, kind: str, options: Dict[str, Any]) -> Any: ...

    def add_group(self, name: str, label: str, children: List[TreeNode]) -> "FormSink": ...

    def add_action(self, name: str, kind: str, options: Dict[str, Any]) -> Any: ...


def _bind_nodes(nodes: List[TreeNode], sink: FormSink) -> None:
    for node in nodes:
        if isinstance(node, FieldNode):
            definition = node.definition
            sink.add_field(definition.name, definition.kind.value, definition.to_options())
        elif isinstance(node, GroupNode):
            child_sink = sink.add_group(node.name, node.label, node.children)
            if child_sink is not None:
                _bind_nodes(node.children, child_sink)
        elif isinstance(node, ActionNode):
            sink.add_action(node.name, node.kind, node.to_options())
        else:
            raise TypeError(f"Unsupported tree node type: {type(node)}")


def bind_tree(tree: FormTree, sink: FormSink) -> FormSink:
    """
    Replay a tree into a host sink.

    A group's children are bound into the sink returned by add_group();
    a None return means the host handles the children itself.
    """
    _bind_nodes(tree.children, sink)
    return sink
