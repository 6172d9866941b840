"""
Form state held in a caller-supplied session.

The interpreter itself is stateless. Hosts that keep the active schema and
a data draft across requests inject their session mapping here; nothing is
stored globally.
"""

from typing import Any, Dict, MutableMapping

from jsonform.config import DEFAULT_CONFIG, FormConfig


class FormStateManager:
    """Reads and writes the active structure and the data draft in a session."""

    def __init__(self, session: MutableMapping[str, Any], config: FormConfig = DEFAULT_CONFIG):
        self.session = session
        self.structure_key = config.structure_key
        self.draft_key = config.draft_key

    def structure(self) -> Dict[str, Any]:
        """The active form structure, or an empty dict."""
        return self.session.get(self.structure_key) or {}

    def data(self) -> Dict[str, Any]:
        """The current data draft, or an empty dict."""
        return dict(self.session.get(self.draft_key) or {})

    def save(self, data: Dict[str, Any]) -> None:
        """Merge data over the existing draft."""
        merged = self.data()
        merged.update(data)
        self.session[self.draft_key] = merged

    def set_structure(self, structure: Dict[str, Any]) -> None:
        self.session[self.structure_key] = structure

    def reset(self) -> None:
        self.session.pop(self.draft_key, None)
        self.session.pop(self.structure_key, None)
