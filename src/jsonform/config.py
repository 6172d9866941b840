"""
Configuration for the form interpreter.

FormConfig holds the tunables of a build: submit button defaults, the
condition depth guard, the policy applied when a date value cannot be
coerced, extra constraint names and the session keys used by the state
manager. It can be loaded from a YAML document.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Tuple

import yaml

from jsonform.errors import ConfigError


COERCION_POLICIES = ("raise", "skip")


@dataclass(frozen=True)
class FormConfig:
    """
    Build-time settings.

    Properties:
        submit_label: Label of the submit action when none is declared
        submit_class: CSS class applied to every submit action by default
        max_condition_depth: Deepest allowed nesting of condition groups
        on_coercion_error:
            "raise" aborts the build on a ValueCoercionError,
            "skip" omits the offending field and logs a warning
        date_formats: strptime patterns tried after ISO-8601 parsing, each
            only for the date/time kinds whose parts it carries
        extra_constraints: Constraint names added to the default registry
        structure_key: Session key of the active form structure
        draft_key: Session key of the data draft
    """

    submit_label: str = "Send"
    submit_class: str = "btn btn-primary"
    max_condition_depth: int = 32
    on_coercion_error: str = "raise"
    date_formats: Tuple[str, ...] = ("%d/%m/%Y", "%d/%m/%Y %H:%M", "%H:%M")
    extra_constraints: Tuple[str, ...] = ()
    structure_key: str = "active_form_structure"
    draft_key: str = "checkout_draft"

    def __post_init__(self):
        if self.on_coercion_error not in COERCION_POLICIES:
            raise ConfigError(
                f"on_coercion_error must be one of {', '.join(COERCION_POLICIES)}, "
                f"got {self.on_coercion_error!r}"
            )
        if not isinstance(self.max_condition_depth, int) or self.max_condition_depth < 1:
            raise ConfigError("max_condition_depth must be a positive integer")


DEFAULT_CONFIG = FormConfig()


def config_from_dict(d: Dict[str, Any] | None) -> FormConfig:
    if not d:
        return DEFAULT_CONFIG
    if not isinstance(d, dict):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name for f in fields(FormConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = dict(d)
    for key in ("date_formats", "extra_constraints"):
        if key in values:
            if not isinstance(values[key], (list, tuple)):
                raise ConfigError(f"{key} must be a list")
            values[key] = tuple(values[key])
    return FormConfig(**values)


def config_to_dict(config: FormConfig) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for f in fields(FormConfig):
        value = getattr(config, f.name)
        d[f.name] = list(value) if isinstance(value, tuple) else value
    return d


def config_from_yaml(s: str) -> FormConfig:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML configuration: {e}") from e
    return config_from_dict(d)


def load_config(path: str) -> FormConfig:
    """Read a YAML configuration file."""
    with open(path) as f:
        return config_from_yaml(f.read())
