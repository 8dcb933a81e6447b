"""Reporters for check results: rich console, JSON, and porcelain."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.markup import escape

from rubric.validation.violations import SEVERITY_ERROR, TYPE_BUSINESS_LOGIC

if TYPE_CHECKING:
    from rich.console import Console

    from rubric.validation.engine import CheckResult
    from rubric.validation.violations import Violation

ERROR_ICON = "✗"
WARNING_ICON = "⚠"

REFACTORING_SUGGESTIONS: tuple[str, ...] = (
    "Custom hooks (src/hooks/) for reusable logic",
    "Services (src/services/) for API and data processing",
    "Utilities (src/utils/) for pure functions",
    "Store actions for state management logic",
)


def group_by_file(violations: list[Violation]) -> dict[str, list[Violation]]:
    """Group violations by file, keeping first-seen file order."""
    grouped: dict[str, list[Violation]] = {}
    for violation in violations:
        grouped.setdefault(violation.file, []).append(violation)
    return grouped


def exit_code(result: CheckResult, *, strict: bool = False) -> int:
    """Return the process exit code for *result*.

    ``0`` when there are no errors (warnings alone pass), ``1`` otherwise.
    With *strict*, warnings fail the run too.
    """
    if result.errors:
        return 1
    if strict and result.warnings:
        return 1
    return 0


def render_report(result: CheckResult, console: Console) -> None:
    """Render a CheckResult using Rich console output.

    Violations are grouped by file; each line shows the severity icon, the
    violation type, the message and the line number when known.  A list of
    refactoring suggestions follows when business logic was detected.
    """
    console.print(
        f"[bold blue]Rubric[/bold blue]: {result.rules_evaluated} constraint files, "
        f"{result.files_checked} files validated"
    )
    console.print()

    if not result.violations:
        console.print("[green]✅ All constraints passed![/green]")
        console.print(f"Validated {result.files_checked} files with 0 violations.")
        return

    errors = len(result.errors)
    warnings = len(result.warnings)
    console.print(f"[red]❌ Found {errors} errors and {warnings} warnings:[/red]")
    console.print()

    for file, violations in group_by_file(result.violations).items():
        console.print(f"[yellow]{escape(file)}:[/yellow]")
        for v in violations:
            line_info = f":{v.line}" if v.line is not None else ""
            if v.severity == SEVERITY_ERROR:
                icon = f"[red]{ERROR_ICON}[/red]"
            else:
                icon = f"[yellow]{WARNING_ICON}[/yellow]"
            console.print(f"  {icon} {escape(f'[{v.type}] {v.message}{line_info}')}")
        console.print()

    if any(v.type == TYPE_BUSINESS_LOGIC for v in result.violations):
        console.print("[blue]\U0001f4a1 Refactoring Suggestions:[/blue]")
        console.print("Consider extracting business logic to:")
        for suggestion in REFACTORING_SUGGESTIONS:
            console.print(f"  - {suggestion}")
        console.print()


def format_json(result: CheckResult) -> str:
    """Format a CheckResult as structured JSON.

    Returns a JSON string with a ``violations`` array, a ``diagnostics``
    mapping of constraint file to parse notes, and a ``summary`` object.
    """
    output: dict[str, object] = {
        "violations": [v.to_dict() for v in result.violations],
        "diagnostics": {
            path: [str(d) for d in diagnostics]
            for path, diagnostics in result.diagnostics.items()
        },
        "summary": {
            "rules_evaluated": result.rules_evaluated,
            "files_checked": result.files_checked,
            "errors": len(result.errors),
            "warnings": len(result.warnings),
            "passed": result.passed,
            "elapsed_ms": result.elapsed_ms,
        },
    }
    return json.dumps(output, indent=2)


def format_porcelain(result: CheckResult) -> str:
    """Format a CheckResult as one line per violation.

    Format: ``severity:type:file:line:message``; a missing line number is an
    empty field.  Returns an empty string when there are no violations.
    """
    lines: list[str] = []
    for v in result.violations:
        line = str(v.line) if v.line is not None else ""
        lines.append(f"{v.severity}:{v.type}:{v.file}:{line}:{v.message}")
    return "\n".join(lines)
