#!/usr/bin/env python3
"""
Demo: Analyze the example checkout schema, then build it for two data sets.
"""

from jsonform.analyzer import analyze_schema
from jsonform.builder import FormTreeBuilder
from jsonform.examples import build_example_checkout_schema
from jsonform.serialization import form_tree_to_yaml, schema_from_dict


def print_report(report):
    """Pretty-print a SchemaReport."""
    print()
    print("=" * 70)
    print(f"SCHEMA ANALYSIS REPORT: {report.schema_slug}")
    print("=" * 70)
    print()

    print("BASIC METRICS")
    print(f"  Sections:              {report.total_sections}")
    print(f"  Categories:            {report.total_categories}")
    print(f"  Questions:             {report.total_questions}")
    print(f"  With dependencies:     {report.questions_with_dependencies}")
    print(f"  With constraints:      {report.questions_with_constraints}")
    print(f"  Max condition depth:   {report.max_condition_depth}")
    print()

    print("FIELD KINDS")
    for kind, count in sorted(report.kind_counts.items()):
        print(f"    {kind}: {count}")
    print()

    if report.warnings:
        print("WARNINGS")
        for warning in report.warnings:
            print(f"  - {warning}")
    else:
        print("No warnings.")
    print()


def main():
    raw = build_example_checkout_schema()
    schema = schema_from_dict(raw)
    print_report(analyze_schema(schema))

    builder = FormTreeBuilder()
    for data in ({}, {"country": "US", "payment_method": "transfer"}):
        tree = builder.build_form(schema, data)
        print("-" * 70)
        print(f"DATA: {data}")
        print(f"FIELDS: {', '.join(tree.field_names())}")
        print("-" * 70)
        print(form_tree_to_yaml(tree))


if __name__ == "__main__":
    main()
