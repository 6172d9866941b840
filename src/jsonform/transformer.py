"""
One-call entry point: schema + data -> host form.

    tree = JsonToFormTransformer().transform(structure, data, sink)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from jsonform.builder import FormTreeBuilder
from jsonform.state import FormStateManager
from jsonform.tree import FormSink, FormTree, bind_tree


class JsonToFormTransformer:
    """Builds a FormTree and binds it into a host sink."""

    def __init__(self, builder: Optional[FormTreeBuilder] = None):
        self.builder = builder or FormTreeBuilder()

    def transform(self, structure: Mapping[str, Any], data: Optional[Mapping[str, Any]],
                  sink: FormSink) -> FormTree:
        tree = self.builder.build_form(structure, data)
        bind_tree(tree, sink)
        return tree

    def transform_from_state(self, state: FormStateManager, sink: FormSink) -> FormTree:
        """Build from the structure and draft stored in a session."""
        return self.transform(state.structure(), state.data(), sink)
