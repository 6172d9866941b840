"""
Schema Analyzer: early diagnostics and inventory of form schemas.

Produces read-only reports on a parsed Schema:
    - Section / category / question inventory
    - Field kinds, including type tokens that silently fall back to text
    - Visibility rule references (undefined, forward, self)
    - Condition complexity
    - Warning flags for authoring mistakes

It does NOT modify the schema and does NOT build a form.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set

from jsonform.conditions import condition_depth, referenced_fields
from jsonform.kinds import is_known_kind, map_kind
from jsonform.model import Schema


@dataclass
class SchemaReport:
    """Analysis report for one schema."""

    schema_slug: str
    total_sections: int = 0
    total_categories: int = 0
    total_questions: int = 0

    # Kinds
    kind_counts: Dict[str, int] = field(default_factory=dict)
    unknown_types: Dict[str, str] = field(default_factory=dict)  # key -> raw token
    duplicate_keys: Set[str] = field(default_factory=set)

    # Visibility rules
    questions_with_dependencies: int = 0
    referenced_fields: Set[str] = field(default_factory=set)
    undefined_references: Set[str] = field(default_factory=set)
    forward_references: Dict[str, List[str]] = field(default_factory=dict)
    self_references: Set[str] = field(default_factory=set)
    malformed_dependencies: Set[str] = field(default_factory=set)
    max_condition_depth: int = 0

    # Constraints
    questions_with_constraints: int = 0
    submit_sections: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_schema(schema: Schema) -> SchemaReport:
    """
    Inventory a schema and flag likely authoring mistakes.

    A forward reference is a dependency on a question declared later: that
    question's own default is not yet in the data context when the
    dependant is evaluated, so only caller-supplied data is seen.
    """
    report = SchemaReport(schema_slug=schema.slug)
    report.total_sections = len(schema.sections)
    report.total_categories = sum(len(s.categories) for s in schema.sections)

    declared: List[str] = []
    kinds: Counter = Counter()

    for section in schema.sections:
        if section.submit is not None:
            report.submit_sections.append(section.slug)
        for category in section.categories:
            for question in category.questions:
                report.total_questions += 1
                if question.key in declared:
                    report.duplicate_keys.add(question.key)
                declared.append(question.key)

                kinds[map_kind(question.type).value] += 1
                if not is_known_kind(question.type):
                    report.unknown_types[question.key] = question.type
                if question.constraints is not None:
                    report.questions_with_constraints += 1
                if question.malformed_dependencies:
                    report.malformed_dependencies.add(question.key)

    report.kind_counts = dict(kinds)

    # =========================================================================
    # VISIBILITY REFERENCES
    # =========================================================================

    all_keys = set(declared)
    seen_so_far: Set[str] = set()
    for _, _, question in schema.iter_questions():
        group = question.display_dependencies
        seen_so_far.add(question.key)
        if group is None:
            continue
        report.questions_with_dependencies += 1
        report.max_condition_depth = max(report.max_condition_depth, condition_depth(group))

        for name in referenced_fields(group):
            report.referenced_fields.add(name)
            if name == question.key:
                report.self_references.add(question.key)
            elif name not in all_keys:
                report.undefined_references.add(name)
            elif name not in seen_so_far:
                report.forward_references.setdefault(question.key, []).append(name)

    # =========================================================================
    # WARNING FLAGS
    # =========================================================================

    if report.duplicate_keys:
        report.add_warning(f"Duplicate question keys: {', '.join(sorted(report.duplicate_keys))}")

    if report.unknown_types:
        report.add_warning(
            "Unknown types rendered as text: "
            + ", ".join(f"{k} ({t})" for k, t in sorted(report.unknown_types.items()))
        )

    if report.malformed_dependencies:
        report.add_warning(
            "Ignored display dependencies without operator/conditions: "
            + ", ".join(sorted(report.malformed_dependencies))
        )

    if report.undefined_references:
        report.add_warning(
            f"Display dependencies on undeclared fields: {', '.join(sorted(report.undefined_references))}"
        )

    if report.forward_references:
        report.add_warning(
            "Display dependencies on later questions: "
            + ", ".join(f"{k} -> {', '.join(v)}" for k, v in sorted(report.forward_references.items()))
        )

    if report.self_references:
        report.add_warning(
            f"Questions depending on themselves: {', '.join(sorted(report.self_references))}"
        )

    if report.max_condition_depth > 5:
        report.add_warning(f"High condition complexity: max depth {report.max_condition_depth}")

    return report
