"""Validation domain: pattern matching, validators, business-logic detection, reporting."""

from rubric.validation.business_logic import (
    SIGNATURES,
    ComponentClass,
    LogicFinding,
    LogicSignature,
    classify_component,
    find_business_logic,
    is_ui_specific,
    validate_business_logic,
)
from rubric.validation.engine import CheckResult, check_project, check_rules, validate_file
from rubric.validation.patterns import count_lines, line_number_at, matches_pattern
from rubric.validation.report import exit_code, format_json, format_porcelain, render_report
from rubric.validation.validators import (
    extract_exports,
    extract_imports,
    validate_exports,
    validate_imports,
    validate_operations,
    validate_size,
    validate_unused_exports,
)
from rubric.validation.violations import ValidationContext, Violation

__all__ = [
    "SIGNATURES",
    "CheckResult",
    "ComponentClass",
    "LogicFinding",
    "LogicSignature",
    "ValidationContext",
    "Violation",
    "check_project",
    "check_rules",
    "classify_component",
    "count_lines",
    "exit_code",
    "extract_exports",
    "extract_imports",
    "find_business_logic",
    "format_json",
    "format_porcelain",
    "is_ui_specific",
    "line_number_at",
    "matches_pattern",
    "render_report",
    "validate_business_logic",
    "validate_exports",
    "validate_file",
    "validate_imports",
    "validate_operations",
    "validate_size",
    "validate_unused_exports",
]
