"""Shared testing fixtures for the learning_hub test suite."""

from .quiz import (  # noqa: F401
    GEO_PROMPT,
    MALFORMED_PROMPT,
    MATH_PROMPT,
    TRUE_FALSE_PROMPT,
    export_rows,
    math_geo_records,
    write_export,
)
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "GEO_PROMPT",
    "MALFORMED_PROMPT",
    "MATH_PROMPT",
    "TRUE_FALSE_PROMPT",
    "WorkspaceBuilder",
    "build_tree",
    "export_rows",
    "math_geo_records",
    "write_export",
]
