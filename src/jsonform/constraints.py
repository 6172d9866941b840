"""
Constraint descriptors.

A question may declare validation constraints by name:

    "constraints": {"NotBlank": null, "Length": {"min": 2, "max": 50}}

build_constraints() turns that map into ConstraintDescriptor records. It
does NOT validate anything: an external validation engine turns each
descriptor's kind into an executable rule. The registry only guarantees
that the names are known, so a typo fails the build instead of the
validation run.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from jsonform.errors import ConfigError, SchemaError, UnknownConstraintError
from jsonform.model import ConstraintDescriptor


STANDARD_CONSTRAINTS = (
    # Basic
    "NotBlank", "NotNull", "Blank", "IsNull", "IsTrue", "IsFalse", "Type",
    # Strings
    "Email", "Length", "Url", "Regex", "Hostname", "Ip", "Cidr", "Uuid",
    "Ulid", "Json", "CssColor",
    # Comparison
    "Range", "EqualTo", "NotEqualTo", "IdenticalTo", "NotIdenticalTo",
    "LessThan", "LessThanOrEqual", "GreaterThan", "GreaterThanOrEqual",
    "Positive", "PositiveOrZero", "Negative", "NegativeOrZero", "DivisibleBy",
    # Dates
    "Date", "DateTime", "Time", "Timezone",
    # Choices and collections
    "Choice", "Count", "Unique",
    # Locale
    "Country", "Language", "Locale", "Currency",
    # Financial and identifiers
    "Luhn", "Iban", "Bic", "CardScheme", "Isbn", "Issn", "Isin",
    # Files
    "File", "Image",
    # Other
    "Valid", "PasswordStrength", "NotCompromisedPassword",
)

_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")

DescriptorFactory = Callable[[Optional[Mapping[str, Any]]], ConstraintDescriptor]


def _descriptor_factory(name: str) -> DescriptorFactory:
    def make(options: Optional[Mapping[str, Any]]) -> ConstraintDescriptor:
        if isinstance(options, Mapping):
            return ConstraintDescriptor(kind=name, options=dict(options))
        return ConstraintDescriptor(kind=name)
    return make


class ConstraintRegistry:
    """
    Closed, immutable map of constraint names to descriptor factories.

    Names are checked once, when the registry is created.
    """

    def __init__(self, names: Iterable[str]):
        factories: Dict[str, DescriptorFactory] = {}
        for name in names:
            if not isinstance(name, str) or not _NAME_RE.match(name):
                raise ConfigError(f"Invalid constraint name: {name!r}")
            if name in factories:
                raise ConfigError(f"Duplicate constraint name: {name}")
            factories[name] = _descriptor_factory(name)
        self._factories = factories

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    @property
    def names(self) -> List[str]:
        return list(self._factories)

    def extended(self, names: Iterable[str]) -> "ConstraintRegistry":
        """A new registry with the given names added; known names are ignored."""
        extra = [n for n in names if n not in self._factories]
        if not extra:
            return self
        return ConstraintRegistry(self.names + extra)

    def build(self, constraints: Mapping[str, Any]) -> List[ConstraintDescriptor]:
        """
        Build descriptors in declaration order.

        Args:
            constraints: Constraint name -> options mapping (options may be None)

        Returns:
            One ConstraintDescriptor per entry

        Raises:
            UnknownConstraintError: If a name is not registered
            SchemaError: If constraints is not a mapping
        """
        if not isinstance(constraints, Mapping):
            raise SchemaError("Question 'constraints' must be a mapping of name to options")
        descriptors = []
        for name, options in constraints.items():
            factory = self._factories.get(name)
            if factory is None:
                raise UnknownConstraintError(name)
            descriptors.append(factory(options))
        return descriptors


DEFAULT_REGISTRY = ConstraintRegistry(STANDARD_CONSTRAINTS)


def build_constraints(constraints: Mapping[str, Any],
                      registry: ConstraintRegistry = DEFAULT_REGISTRY) -> List[ConstraintDescriptor]:
    return registry.build(constraints)
