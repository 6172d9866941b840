"""
Serialization helpers for schema documents and form trees.

Schema documents come in as JSON or YAML and are parsed, via an
intermediate dict, into jsonform.model objects. Parsing is where the
mandatory fields are enforced: a missing slug, sections list, question key
or type raises SchemaError before anything is built.

Form trees go out as plain dicts, JSON or YAML for hosts and debugging.
"""
from __future__ import annotations

import io
import json
from datetime import date, datetime, time
from pathlib import PurePath
from typing import Any, Dict, List, Mapping, Optional

import yaml

from jsonform.conditions import (
    DEFAULT_MAX_DEPTH,
    condition_to_dict,
    group_from_dict,
    is_group_mapping,
)
from jsonform.errors import SchemaError
from jsonform.model import (
    Category,
    ConstraintDescriptor,
    DisplayOptions,
    FieldDefinition,
    GroupDisplay,
    Question,
    Schema,
    Section,
    SubmitSpec,
)
from jsonform.tree import ActionNode, FieldNode, FormTree, GroupNode


QUESTION_KEYS = (
    "key", "type", "label", "required", "data", "constraints", "displayDependencies",
)


def _non_empty_slug(d: Mapping[str, Any]) -> bool:
    slug = d.get("slug")
    return isinstance(slug, str) and slug.strip() != ""


def _dict_or_empty(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _list_or_empty(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


# =========================================================================
# SCHEMA: dict -> model
# =========================================================================

def group_display_from_dict(d: Any) -> GroupDisplay:
    d = _dict_or_empty(d)
    return GroupDisplay(attr=_dict_or_empty(d.get("attr")), label_attr=_dict_or_empty(d.get("label_attr")))


def display_options_from_dict(d: Any) -> DisplayOptions:
    d = _dict_or_empty(d)
    return DisplayOptions(
        sections=group_display_from_dict(d.get("sections")),
        categories=group_display_from_dict(d.get("categories")),
    )


def submit_from_dict(d: Any) -> Optional[SubmitSpec]:
    if not isinstance(d, Mapping):
        return None
    return SubmitSpec(label=d.get("label"), css_class=d.get("class"), attr=_dict_or_empty(d.get("attr")))


def question_from_dict(d: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Question:
    if not isinstance(d, Mapping) or d.get("key") is None or d.get("type") is None:
        raise SchemaError("Each question must have at least a 'key' and a 'type'.")
    if not isinstance(d["key"], str) or not isinstance(d["type"], str):
        raise SchemaError(f"Question 'key' and 'type' must be strings (got key={d['key']!r}).")

    question = Question(
        key=d["key"],
        type=d["type"],
        label=d.get("label"),
        required=d.get("required"),
        data=d.get("data"),
        constraints=d.get("constraints"),
        options={k: v for k, v in d.items() if k not in QUESTION_KEYS},
    )

    dependencies = d.get("displayDependencies")
    if dependencies:
        if is_group_mapping(dependencies):
            question.display_dependencies = group_from_dict(dependencies, max_depth=max_depth)
        else:
            question.malformed_dependencies = True
    return question


def category_from_dict(d: Any, section_slug: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Category:
    if not isinstance(d, Mapping) or not _non_empty_slug(d):
        raise SchemaError(
            f"Each category in section '{section_slug}' must have a 'slug' (non-empty string)."
        )
    return Category(
        slug=d["slug"],
        title=d.get("title"),
        questions=[question_from_dict(q, max_depth) for q in _list_or_empty(d.get("questions"))],
    )


def section_from_dict(d: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Section:
    if not isinstance(d, Mapping) or not _non_empty_slug(d):
        raise SchemaError("Each section must have a 'slug' (non-empty string).")
    return Section(
        slug=d["slug"],
        title=d.get("title"),
        categories=[category_from_dict(c, d["slug"], max_depth) for c in _list_or_empty(d.get("categories"))],
        submit=submit_from_dict(d.get("submit")),
    )


def schema_from_dict(d: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Schema:
    """
    Parse and validate a raw schema document.

    Raises:
        SchemaError: If a mandatory field is missing or invalid
    """
    if not isinstance(d, Mapping) or d.get("sections") is None or d.get("slug") is None:
        raise SchemaError(
            "The JSON structure of the form must contain at least one section and a 'slug' field."
        )
    if not isinstance(d["sections"], (list, tuple)):
        raise SchemaError("The form 'sections' must be a list.")
    return Schema(
        slug=d["slug"],
        sections=[section_from_dict(s, max_depth) for s in d["sections"]],
        display_options=display_options_from_dict(d.get("displayOptions")),
    )


# =========================================================================
# SCHEMA: model -> dict
# =========================================================================

def group_display_to_dict(g: GroupDisplay) -> Dict[str, Any]:
    return {"attr": g.attr, "label_attr": g.label_attr}


def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {"key": q.key, "type": q.type}
    if q.label is not None:
        d["label"] = q.label
    if q.required is not None:
        d["required"] = q.required
    if q.data is not None:
        d["data"] = q.data
    if q.constraints is not None:
        d["constraints"] = q.constraints
    if q.display_dependencies is not None:
        d["displayDependencies"] = condition_to_dict(q.display_dependencies)
    d.update(q.options)
    return d


def category_to_dict(c: Category) -> Dict[str, Any]:
    d: Dict[str, Any] = {"slug": c.slug}
    if c.title is not None:
        d["title"] = c.title
    d["questions"] = [question_to_dict(q) for q in c.questions]
    return d


def section_to_dict(s: Section) -> Dict[str, Any]:
    d: Dict[str, Any] = {"slug": s.slug}
    if s.title is not None:
        d["title"] = s.title
    d["categories"] = [category_to_dict(c) for c in s.categories]
    if s.submit is not None:
        submit: Dict[str, Any] = {}
        if s.submit.label is not None:
            submit["label"] = s.submit.label
        if s.submit.css_class is not None:
            submit["class"] = s.submit.css_class
        if s.submit.attr:
            submit["attr"] = s.submit.attr
        d["submit"] = submit
    return d


def schema_to_dict(s: Schema) -> Dict[str, Any]:
    return {
        "slug": s.slug,
        "displayOptions": {
            "sections": group_display_to_dict(s.display_options.sections),
            "categories": group_display_to_dict(s.display_options.categories),
        },
        "sections": [section_to_dict(sec) for sec in s.sections],
    }


def schema_from_json(s: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Schema:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON schema document: {e}") from e
    return schema_from_dict(d, max_depth)


def schema_from_yaml(s: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Schema:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML schema document: {e}") from e
    return schema_from_dict(d, max_depth)


def load_schema(path: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Schema:
    """Read a schema file; .json is parsed as JSON, anything else as YAML."""
    with open(path) as f:
        text = f.read()
    if str(path).endswith(".json"):
        return schema_from_json(text, max_depth)
    return schema_from_yaml(text, max_depth)


# =========================================================================
# FORM TREE: model -> dict
# =========================================================================

def _plain_value(value: Any) -> Any:
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, io.IOBase):
        return getattr(value, "name", repr(value))
    if isinstance(value, Mapping):
        return {k: _plain_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain_value(v) for v in value]
    return value


def constraint_to_dict(c: ConstraintDescriptor) -> Dict[str, Any]:
    if c.options is None:
        return {"kind": c.kind}
    return {"kind": c.kind, "options": _plain_value(c.options)}


def field_definition_to_dict(f: FieldDefinition) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "name": f.name,
        "kind": f.kind.value,
        "label": f.label,
        "required": f.required,
    }
    if f.has_default:
        d["defaultValue"] = _plain_value(f.default_value)
    d["constraints"] = [constraint_to_dict(c) for c in f.constraints]
    if f.options:
        d["options"] = _plain_value(f.options)
    return d


def node_to_dict(node: Any) -> Dict[str, Any]:
    if isinstance(node, GroupNode):
        return {
            "node": "group",
            "name": node.name,
            "label": node.label,
            "options": _plain_value(node.options),
            "children": [node_to_dict(c) for c in node.children],
        }
    if isinstance(node, FieldNode):
        return {"node": "field", **field_definition_to_dict(node.definition)}
    if isinstance(node, ActionNode):
        return {"node": "action", "name": node.name, "kind": node.kind, **node.to_options()}
    raise TypeError(f"Unsupported tree node type: {type(node)}")


def form_tree_to_dict(t: FormTree) -> Dict[str, Any]:
    return {
        "slug": t.slug,
        "has_explicit_submit": t.has_explicit_submit,
        "data": _plain_value(t.data),
        "children": [node_to_dict(c) for c in t.children],
    }


def form_tree_to_json(t: FormTree) -> str:
    return json.dumps(form_tree_to_dict(t), sort_keys=True)


def form_tree_to_yaml(t: FormTree) -> str:
    return yaml.safe_dump(form_tree_to_dict(t), sort_keys=False)
