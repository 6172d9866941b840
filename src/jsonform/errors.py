"""
Error taxonomy for the JSON form interpreter.

Every error raised by this package derives from JsonFormError so callers can
catch the whole family at once. All of them are structural/configuration
errors discovered at build or evaluation time: they are never retried and
are expected to be treated as a broken schema.
"""

from typing import Any, Optional


class JsonFormError(Exception):
    """Base class for all errors raised by jsonform."""
    pass


class SchemaError(JsonFormError):
    """Raised when a mandatory schema field is missing or invalid."""
    pass


class ConditionDepthError(SchemaError):
    """Raised when a condition tree nests deeper than the configured limit."""

    def __init__(self, limit: int):
        super().__init__(f"Condition tree exceeds maximum depth of {limit}")
        self.limit = limit


class UnknownConstraintError(JsonFormError):
    """Raised when a declared constraint name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown constraint '{name}'")
        self.name = name


class UnsupportedOperatorError(JsonFormError):
    """Raised when a condition group uses an operator other than AND/OR/NOT."""

    def __init__(self, operator: Any):
        super().__init__(f"Unsupported logical operator: {operator}")
        self.operator = operator


class ValueCoercionError(JsonFormError):
    """Raised when a raw value cannot be converted for its field kind."""

    def __init__(self, kind: Any, value: Any, field: Optional[str] = None):
        where = f" for field '{field}'" if field else ""
        super().__init__(f"Cannot coerce {value!r} to {kind}{where}")
        self.kind = kind
        self.value = value
        self.field = field


class ConfigError(JsonFormError):
    """Raised when a configuration document is invalid."""
    pass
