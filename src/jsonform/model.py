"""
Core Form Model Objects

Defines the data structures a schema document is parsed into, plus the
field definitions the builder produces from them:
    - Schema (root container)
    - Sections and Categories (structural groupings)
    - Questions (field descriptors)
    - Constraint descriptors and field definitions (build output)

ARCHITECTURAL RULE:
    Sections and categories carry display metadata only.
    They never introduce a data namespace: every question value lives in
    one flat data context keyed by question key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jsonform.coercion import UNSET
from jsonform.conditions import ConditionGroup
from jsonform.kinds import FieldKind


@dataclass
class GroupDisplay:
    """HTML attributes applied to every section or category group."""

    attr: Dict[str, Any] = field(default_factory=dict)
    label_attr: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DisplayOptions:
    """
    Schema-wide display options.

    Properties:
        sections: Attributes given to every section group
        categories: Attributes given to every category group
    """

    sections: GroupDisplay = field(default_factory=GroupDisplay)
    categories: GroupDisplay = field(default_factory=GroupDisplay)


@dataclass
class SubmitSpec:
    """
    Submit button declared by a section.

    Properties:
        label: Button label (builder default when None)
        css_class: Replaces the default CSS class (schema key "class")
        attr: Extra attributes merged over the defaults; these win
    """

    label: Optional[str] = None
    css_class: Optional[str] = None
    attr: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Question:
    """
    A single field descriptor.

    Properties:
        key: Data key of the field (also its name in the tree)
        type: Raw type token, resolved by jsonform.kinds.map_kind
        label: Optional label (defaults to the capitalized key)
        required: Whether the host should require a value
        data: Question-level default, used only when the data context has none
        constraints: Constraint name -> options, in declaration order
        display_dependencies: Visibility rule; None means always shown
        malformed_dependencies:
            True when a dependency block was declared but lacks "operator"
            or "conditions"; such a question is always shown
        options: Every other declared property, passed through to the field
    """

    key: str
    type: str
    label: Optional[str] = None
    required: Optional[bool] = None
    data: Any = None
    constraints: Optional[Dict[str, Any]] = None
    display_dependencies: Optional[ConditionGroup] = None
    malformed_dependencies: bool = False
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Category:
    """Second-level grouping of questions inside a section."""

    slug: str
    title: Optional[str] = None
    questions: List[Question] = field(default_factory=list)


@dataclass
class Section:
    """Top-level grouping; may declare its own submit button."""

    slug: str
    title: Optional[str] = None
    categories: List[Category] = field(default_factory=list)
    submit: Optional[SubmitSpec] = None


@dataclass
class Schema:
    """
    Root container for a form definition.

    INVARIANTS:
        - slug is non-empty
        - every section and category has a non-empty slug
        - every question has a key and a type
    """

    slug: str
    sections: List[Section] = field(default_factory=list)
    display_options: DisplayOptions = field(default_factory=DisplayOptions)

    def iter_questions(self):
        """Yield (section, category, question) in declaration order."""
        for section in self.sections:
            for category in section.categories:
                for question in category.questions:
                    yield section, category, question

    def get_question(self, key: str) -> Optional[Question]:
        for _, _, question in self.iter_questions():
            if question.key == key:
                return question
        return None


@dataclass(frozen=True)
class ConstraintDescriptor:
    """
    Opaque validation rule record.

    kind is the registered constraint name; options is None when the schema
    supplied none. Executing the rule is the host validation engine's job.
    """

    kind: str
    options: Optional[Dict[str, Any]] = None


@dataclass
class FieldDefinition:
    """
    A fully resolved field, ready to bind.

    default_value is UNSET when the field has no initial value of its own
    (file fields without a host file object).
    """

    name: str
    kind: FieldKind
    label: str
    required: bool = False
    default_value: Any = UNSET
    constraints: List[ConstraintDescriptor] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_default(self) -> bool:
        return self.default_value is not UNSET

    def to_options(self) -> Dict[str, Any]:
        """Options mapping handed to a host sink's add_field()."""
        options = dict(self.options)
        options["label"] = self.label
        options["required"] = self.required
        if self.has_default:
            options["data"] = self.default_value
        if self.constraints:
            options["constraints"] = list(self.constraints)
        return options
