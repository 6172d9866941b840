"""
Tests for schema parsing and form tree serialization.

These tests ensure schema documents parse the same from dict, JSON and
YAML, and that built trees serialize to plain data.
"""

import io
import json
from datetime import date
from pathlib import Path

import pytest
import yaml

from jsonform.builder import build_form
from jsonform.conditions import ConditionGroup
from jsonform.errors import SchemaError
from jsonform.examples import build_example_checkout_schema
from jsonform.serialization import (
    form_tree_to_dict,
    form_tree_to_json,
    form_tree_to_yaml,
    load_schema,
    schema_from_dict,
    schema_from_json,
    schema_from_yaml,
    schema_to_dict,
)


class TestSchemaParsing:
    """Test raw document -> model."""

    def test_example_schema(self):
        schema = schema_from_dict(build_example_checkout_schema())
        assert schema.slug == "checkout"
        assert [s.slug for s in schema.sections] == ["customer", "payment"]
        assert schema.display_options.categories.label_attr == {"class": "h5"}
        assert schema.sections[1].submit.label == "Pay"
        promo = schema.get_question("promo")
        assert isinstance(promo.display_dependencies, ConditionGroup)
        assert schema.get_question("nope") is None

    def test_question_options_exclude_modelled_keys(self):
        question = schema_from_dict(build_example_checkout_schema()).get_question("payment_method")
        assert question.options == {"choices": {"Card": "card", "Transfer": "transfer"}}
        assert question.data == "card"
        assert question.required is True

    def test_submit_class_key(self):
        raw = {"slug": "f", "sections": [{"slug": "s", "submit": {"class": "big"}}]}
        assert schema_from_dict(raw).sections[0].submit.css_class == "big"

    def test_sections_must_be_a_list(self):
        with pytest.raises(SchemaError):
            schema_from_dict({"slug": "f", "sections": {"slug": "s"}})

    def test_dict_roundtrip(self):
        raw = build_example_checkout_schema()
        before = schema_to_dict(schema_from_dict(raw))
        after = schema_to_dict(schema_from_dict(before))
        assert before == after

    def test_json_and_yaml_agree(self):
        raw = build_example_checkout_schema()
        from_json = schema_from_json(json.dumps(raw))
        from_yaml = schema_from_yaml(yaml.safe_dump(raw))
        assert schema_to_dict(from_json) == schema_to_dict(from_yaml)

    def test_invalid_json(self):
        with pytest.raises(SchemaError) as exc:
            schema_from_json("{not json")
        assert isinstance(exc.value.__cause__, json.JSONDecodeError)

    def test_invalid_yaml(self):
        with pytest.raises(SchemaError):
            schema_from_yaml("slug: [unclosed")

    def test_load_schema_files(self, tmp_path):
        raw = build_example_checkout_schema()
        json_path = tmp_path / "form.json"
        json_path.write_text(json.dumps(raw))
        yaml_path = tmp_path / "form.yaml"
        yaml_path.write_text(yaml.safe_dump(raw))
        assert schema_to_dict(load_schema(str(json_path))) == schema_to_dict(load_schema(str(yaml_path)))


class TestTreeSerialization:
    """Test FormTree -> plain data."""

    def test_tree_dict_shape(self):
        schema = {"slug": "f", "sections": [{"slug": "s", "categories": [{"slug": "c", "questions": [
            {"key": "born", "type": "date", "data": "2000-01-31", "constraints": {"NotNull": None}},
        ]}]}]}
        d = form_tree_to_dict(build_form(schema, {}))
        assert d["slug"] == "f"
        assert d["has_explicit_submit"] is False
        section = d["children"][0]
        assert section["node"] == "group"
        field = section["children"][0]["children"][0]
        assert field == {
            "node": "field",
            "name": "born",
            "kind": "date",
            "label": "Born",
            "required": False,
            "defaultValue": "2000-01-31",
            "constraints": [{"kind": "NotNull"}],
        }
        assert d["children"][-1] == {
            "node": "action", "name": "submit", "kind": "submit",
            "label": "Send", "attr": {"class": "btn btn-primary"},
        }

    def test_unset_default_omitted(self):
        schema = {"slug": "f", "sections": [{"slug": "s", "categories": [{"slug": "c", "questions": [
            {"key": "cv", "type": "file"},
        ]}]}]}
        field = form_tree_to_dict(build_form(schema, {}))["children"][0]["children"][0]["children"][0]
        assert "defaultValue" not in field

    def test_host_objects_rendered_as_text(self):
        schema = {"slug": "f", "sections": [{"slug": "s", "categories": [{"slug": "c", "questions": [
            {"key": "cv", "type": "file"}, {"key": "scan", "type": "file"},
        ]}]}]}
        data = {"cv": Path("/tmp/cv.pdf"), "scan": io.BytesIO(b"x"), "when": date(2020, 1, 1)}
        d = form_tree_to_dict(build_form(schema, data))
        assert d["data"]["cv"] == "/tmp/cv.pdf"
        assert d["data"]["when"] == "2020-01-01"
        assert isinstance(d["data"]["scan"], str)

    def test_json_and_yaml_output(self):
        tree = build_form(build_example_checkout_schema(), {"country": "FR", "age": 30})
        assert json.loads(form_tree_to_json(tree)) == form_tree_to_dict(tree)
        assert yaml.safe_load(form_tree_to_yaml(tree)) == form_tree_to_dict(tree)
