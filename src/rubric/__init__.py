"""Rubric - architecture-conformance checker for .rux constraint files."""

__version__ = "0.3.0"
