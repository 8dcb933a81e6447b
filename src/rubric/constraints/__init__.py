"""Constraint domain: rule model, .rux tokenizer and parser, file discovery."""

from rubric.constraints.discovery import find_rule_files
from rubric.constraints.model import (
    CONTAINER,
    KNOWN_OPERATIONS,
    PRESENTATION,
    FileConstraints,
    Rule,
    is_component_location,
)
from rubric.constraints.parser import ParseResult, load_rule, parse_rule, parse_rux
from rubric.constraints.tokenizer import ParseDiagnostic, Token, tokenize

__all__ = [
    "CONTAINER",
    "KNOWN_OPERATIONS",
    "PRESENTATION",
    "FileConstraints",
    "ParseDiagnostic",
    "ParseResult",
    "Rule",
    "Token",
    "find_rule_files",
    "is_component_location",
    "load_rule",
    "parse_rule",
    "parse_rux",
    "tokenize",
]
