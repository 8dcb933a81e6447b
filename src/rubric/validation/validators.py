"""Text validators: file size, imports, denied operations, and exports.

These work on raw source text with regular expressions; no syntax tree is
built.  Each validator appends its findings to the shared
:class:`ValidationContext` and never raises for content problems.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from rubric.constraints.model import OP_CONSOLE, OP_LOCAL_STORAGE, OP_NETWORK
from rubric.validation.patterns import count_lines, line_number_at, matches_pattern
from rubric.validation.violations import (
    SEVERITY_WARNING,
    TYPE_EXPORT,
    TYPE_FILE_SIZE,
    TYPE_IMPORT,
    TYPE_OPERATION,
    TYPE_UNUSED_EXPORT,
)

if TYPE_CHECKING:
    from pathlib import Path

    from rubric.constraints.model import Rule
    from rubric.validation.violations import ValidationContext

# ---------------------------------------------------------------------------
# Patterns (compiled once)
# ---------------------------------------------------------------------------

# import X from 'a' / import {X} from 'a' / import X, {Y} from 'a' /
# import * as X from 'a' / import type {X} from 'a' / import 'a'
_IMPORT_RE = re.compile(
    r"""\bimport\s+(?:type\s+)?(?:[\w$*\s{},]+?\s+from\s+)?['"]([^'"\n]+)['"]"""
)
# export * from 'a' / export {X} from 'a' / export * as ns from 'a'
_REEXPORT_RE = re.compile(
    r"""\bexport\s+(?:type\s+)?(?:\*|\{[^}]*\})(?:\s+as\s+\w+)?\s+from\s+['"]([^'"\n]+)['"]"""
)

_EXPORT_RE = re.compile(
    r"^[ \t]*export\s+(?:default\s+)?(?:async\s+)?(?:const|let|var|class|function)[\s*]+(\w+)",
    re.MULTILINE,
)
_UTIL_EXPORT_RE = re.compile(r"\bexport\s+(?:async\s+)?(?:const|function|class)\s+(\w+)")

# Operation identifier -> (family label, patterns).
OPERATION_TABLES: dict[str, tuple[str, tuple[re.Pattern[str], ...]]] = {
    OP_CONSOLE: (
        "console",
        (re.compile(r"console\.(?:log|warn|error|info|debug|trace)"),),
    ),
    OP_NETWORK: (
        "network",
        (
            re.compile(r"fetch\s*\("),
            re.compile(r"axios\."),
            re.compile(r"XMLHttpRequest"),
            re.compile(r"\.get\s*\("),
            re.compile(r"\.post\s*\("),
        ),
    ),
    OP_LOCAL_STORAGE: (
        "localStorage",
        (re.compile(r"localStorage\.(?:getItem|setItem|removeItem|clear)"),),
    ),
}


# ---------------------------------------------------------------------------
# Extraction helpers
# ---------------------------------------------------------------------------


def extract_imports(content: str) -> list[tuple[str, int]]:
    """Return ``(import_path, line_number)`` for each static import, in file order."""
    found: list[tuple[int, str]] = []
    for regex in (_IMPORT_RE, _REEXPORT_RE):
        for match in regex.finditer(content):
            found.append((match.start(), match.group(1)))
    found.sort()
    return [(path, line_number_at(content, offset)) for offset, path in found]


def extract_exports(content: str) -> list[tuple[str, int]]:
    """Return ``(name, line_number)`` for each top-level named export."""
    return [
        (match.group(1), line_number_at(content, match.start()))
        for match in _EXPORT_RE.finditer(content)
    ]


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_size(ctx: ValidationContext, path: Path, content: str, rule: Rule) -> None:
    """Flag files longer than ``deny file.lines > N``."""
    max_lines = rule.file_constraints.max_lines
    if max_lines is None:
        return
    line_count = count_lines(content)
    if line_count > max_lines:
        ctx.add(
            path,
            rule.module_name,
            TYPE_FILE_SIZE,
            f"File has {line_count} lines (max: {max_lines})",
        )


def validate_imports(ctx: ValidationContext, path: Path, content: str, rule: Rule) -> None:
    """Check every import against the deny list and, if present, the allow list."""
    for import_path, line in extract_imports(content):
        for denied in rule.denied_imports:
            if matches_pattern(import_path, denied):
                ctx.add(
                    path,
                    rule.module_name,
                    TYPE_IMPORT,
                    f"Forbidden import '{import_path}' matches pattern '{denied}'",
                    line,
                )

        if rule.allowed_imports and not any(
            matches_pattern(import_path, allowed) for allowed in rule.allowed_imports
        ):
            ctx.add(
                path,
                rule.module_name,
                TYPE_IMPORT,
                f"Import '{import_path}' is not in allowed list",
                line,
            )


def validate_operations(ctx: ValidationContext, path: Path, content: str, rule: Rule) -> None:
    """Report every occurrence of a denied operation family."""
    for operation in rule.denied_operations:
        table = OPERATION_TABLES.get(operation)
        if table is None:
            continue
        family, patterns = table
        for regex in patterns:
            for match in regex.finditer(content):
                ctx.add(
                    path,
                    rule.module_name,
                    TYPE_OPERATION,
                    f"Forbidden {family} operation: {match.group(0)}",
                    line_number_at(content, match.start()),
                )


def validate_exports(ctx: ValidationContext, path: Path, content: str, rule: Rule) -> None:
    """Flag exported private members and exports matching ``deny exports``."""
    for name, line in extract_exports(content):
        if name.startswith("_"):
            ctx.add(
                path, rule.module_name, TYPE_EXPORT, f"Exporting private member: {name}", line
            )
        for denied in rule.denied_exports:
            if matches_pattern(name, denied):
                ctx.add(
                    path,
                    rule.module_name,
                    TYPE_EXPORT,
                    f"Export '{name}' matches denied pattern '{denied}'",
                    line,
                )


def validate_unused_exports(
    ctx: ValidationContext, path: Path, content: str, rule: Rule
) -> None:
    """Warn about every export of a utilities module.

    There is no project-wide usage graph, so each export is reported as
    *possibly* unused; this is a reminder, not an analysis.
    """
    if ctx.config.utils_marker not in "/" + rule.location:
        return
    for match in _UTIL_EXPORT_RE.finditer(content):
        ctx.add(
            path,
            rule.module_name,
            TYPE_UNUSED_EXPORT,
            f"Exported function '{match.group(1)}' may be unused"
            " - verify it's imported elsewhere",
            severity=SEVERITY_WARNING,
        )
