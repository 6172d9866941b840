"""
JSON Form Interpreter

Turns a declarative JSON form schema (sections -> categories -> questions)
into a runtime field tree, deciding per question whether it is displayed
given the rest of the data.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Widget rendering
    - HTTP binding
    - Storage of drafts
    - Execution of validation rules

It emits a FormTree and opaque constraint descriptors.
Host frameworks bind them through jsonform.tree.FormSink.
"""

__version__ = "0.1.0"
