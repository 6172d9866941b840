"""
Form tree builder.

Walks a schema document (sections -> categories -> questions) and produces
a FormTree: one group per section and category, one field per visible
question, and submit actions.

All question values share ONE flat data context keyed by question key;
section and category groups carry display metadata only
(inherit_data=True).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from jsonform.coercion import coerce_value
from jsonform.config import DEFAULT_CONFIG, FormConfig
from jsonform.constraints import DEFAULT_REGISTRY, ConstraintRegistry
from jsonform.errors import ValueCoercionError
from jsonform.evaluator import should_display
from jsonform.kinds import map_kind
from jsonform.model import FieldDefinition, GroupDisplay, Question, Schema, SubmitSpec
from jsonform.serialization import question_from_dict, schema_from_dict
from jsonform.tree import ActionNode, FieldNode, FormTree, GroupNode

logger = logging.getLogger(__name__)


def ucfirst(s: str) -> str:
    """Upper-case the first character only ("first_name" -> "First_name")."""
    return s[:1].upper() + s[1:]


def _group_options(display: GroupDisplay) -> Dict[str, Any]:
    return {
        "inherit_data": True,
        "attr": dict(display.attr),
        "label_attr": dict(display.label_attr),
    }


class FormTreeBuilder:
    """
    Builds FormTrees from schema documents.

    A builder holds configuration only; every build works on its own copy
    of the data context, so one builder can serve concurrent callers.
    """

    def __init__(self, config: FormConfig = DEFAULT_CONFIG,
                 registry: Optional[ConstraintRegistry] = None):
        self.config = config
        self.registry = (registry or DEFAULT_REGISTRY).extended(config.extra_constraints)

    # =====================================================================
    # SUBMIT ACTIONS
    # =====================================================================

    def default_submit(self) -> ActionNode:
        return ActionNode(label=self.config.submit_label, attr={"class": self.config.submit_class})

    def submit_action(self, submit: SubmitSpec) -> ActionNode:
        attr: Dict[str, Any] = {"class": self.config.submit_class}
        if submit.css_class is not None:
            attr["class"] = submit.css_class
        attr.update(submit.attr)
        label = submit.label if submit.label is not None else self.config.submit_label
        return ActionNode(label=label, attr=attr)

    # =====================================================================
    # FIELDS
    # =====================================================================

    def build_field(self, question: Question, form_data: Mapping[str, Any]) -> FieldDefinition:
        """
        Resolve one question into a FieldDefinition, ignoring visibility.

        The value is the data context entry if set, else the question's own
        default, else None; it is then coerced for the field kind.

        Raises:
            ValueCoercionError: If a date/time value cannot be parsed
            UnknownConstraintError: If a constraint name is not registered
        """
        kind = map_kind(question.type)
        value = form_data.get(question.key)
        if value is None:
            value = question.data

        try:
            default_value = coerce_value(kind, value, self.config.date_formats)
        except ValueCoercionError as e:
            raise ValueCoercionError(kind.value, value, field=question.key) from e

        constraints = []
        if question.constraints is not None:
            constraints = self.registry.build(question.constraints)

        return FieldDefinition(
            name=question.key,
            kind=kind,
            label=question.label if question.label is not None else ucfirst(question.key),
            required=question.required if question.required is not None else False,
            default_value=default_value,
            constraints=constraints,
            options=dict(question.options),
        )

    def add_question(self, scope: GroupNode, question: Union[Question, Mapping[str, Any]],
                     form_data: Mapping[str, Any]) -> Optional[FieldDefinition]:
        """
        Add a question's field to a group if its visibility rule allows it.

        Args:
            scope: Group the field is appended to
            question: Parsed Question, or the raw question mapping
            form_data: Flat data context for value resolution and visibility

        Returns:
            The added FieldDefinition, or None if the field was left out

        Raises:
            SchemaError: If the question has no key or type
        """
        if not isinstance(question, Question):
            question = question_from_dict(question, self.config.max_condition_depth)

        try:
            definition = self.build_field(question, form_data)
        except ValueCoercionError as e:
            if self.config.on_coercion_error != "skip":
                raise
            logger.warning("Skipping field %s: %s", question.key, e)
            return None

        if question.display_dependencies is not None:
            if not should_display(question.display_dependencies, form_data,
                                  max_depth=self.config.max_condition_depth):
                logger.debug("Field %s hidden by its display dependencies", question.key)
                return None

        scope.children.append(FieldNode(definition))
        return definition

    def build_collection_entry(self, question: Union[Question, Mapping[str, Any]],
                               row: Optional[Mapping[str, Any]]) -> List[FieldDefinition]:
        """
        Resolve the sub-fields of one row of a collection question.

        The sub-field descriptors are read from the question's "fields"
        option (or "entry_options.fields"). Each is treated like a normal
        question against the row's own values; visibility rules do not apply.
        """
        if not isinstance(question, Question):
            question = question_from_dict(question, self.config.max_condition_depth)
        raw_fields = question.options.get("fields")
        if raw_fields is None:
            raw_fields = (question.options.get("entry_options") or {}).get("fields") or []
        row_data = dict(row) if isinstance(row, Mapping) else {}
        return [
            self.build_field(question_from_dict(f, self.config.max_condition_depth), row_data)
            for f in raw_fields
        ]

    # =====================================================================
    # FORM
    # =====================================================================

    def build_form(self, schema: Union[Schema, Mapping[str, Any]],
                   form_data: Optional[Mapping[str, Any]] = None) -> FormTree:
        """
        Build the field tree for a schema and data context.

        Args:
            schema: Parsed Schema, or the raw schema document
            form_data: Caller data keyed by question key (never mutated)

        Returns:
            FormTree with sections, categories, visible fields and submit actions

        Raises:
            SchemaError: Missing slug/sections, section or category slug,
                question key or type
            UnknownConstraintError: A constraint name is not registered
            UnsupportedOperatorError: A dependency group uses another operator
            ValueCoercionError: A date/time value cannot be parsed
                (unless on_coercion_error is "skip")
        """
        if not isinstance(schema, Schema):
            schema = schema_from_dict(schema, self.config.max_condition_depth)

        data: Dict[str, Any] = dict(form_data or {})
        tree = FormTree(slug=schema.slug)
        display = schema.display_options
        logger.debug("Building form %s (%d sections)", schema.slug, len(schema.sections))

        for section in schema.sections:
            section_group = GroupNode(
                name=section.slug,
                label=section.title if section.title is not None else ucfirst(section.slug),
                options=_group_options(display.sections),
            )

            for category in section.categories:
                category_group = GroupNode(
                    name=category.slug,
                    label=category.title if category.title is not None else ucfirst(category.slug),
                    options=_group_options(display.categories),
                )
                for question in category.questions:
                    if data.get(question.key) is None:
                        data[question.key] = question.data
                    self.add_question(category_group, question, data)
                section_group.children.append(category_group)

            if section.submit is not None:
                section_group.children.append(self.submit_action(section.submit))
                tree.has_explicit_submit = True

            tree.children.append(section_group)

        if not tree.has_explicit_submit:
            tree.children.append(self.default_submit())

        tree.data = data
        return tree


def build_form(schema: Union[Schema, Mapping[str, Any]],
               form_data: Optional[Mapping[str, Any]] = None,
               config: FormConfig = DEFAULT_CONFIG) -> FormTree:
    """Build a form tree with a one-off builder."""
    return FormTreeBuilder(config).build_form(schema, form_data)
