"""Check orchestrator: discover rules, validate their targets, collect results."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rubric.config import CheckConfig, load_config
from rubric.constraints.discovery import find_rule_files
from rubric.constraints.parser import load_rule
from rubric.validation.business_logic import validate_business_logic
from rubric.validation.validators import (
    validate_exports,
    validate_imports,
    validate_operations,
    validate_size,
    validate_unused_exports,
)
from rubric.validation.violations import (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    TYPE_MISSING,
    ValidationContext,
    Violation,
)

if TYPE_CHECKING:
    from pathlib import Path

    from rubric.constraints.model import Rule
    from rubric.constraints.tokenizer import ParseDiagnostic

logger = logging.getLogger(__name__)

# Validators run against every loaded target, in this order.
FILE_VALIDATORS = (
    validate_size,
    validate_imports,
    validate_operations,
    validate_exports,
    validate_unused_exports,
    validate_business_logic,
)


@dataclass
class CheckResult:
    """Result of a check run."""

    violations: list[Violation] = field(default_factory=list)
    rules_evaluated: int = 0
    files_checked: int = 0
    diagnostics: dict[str, tuple[ParseDiagnostic, ...]] = field(default_factory=dict)
    elapsed_ms: float = 0.0

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == SEVERITY_ERROR]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == SEVERITY_WARNING]

    @property
    def passed(self) -> bool:
        """True when no error-severity violation was found (warnings do not fail a run)."""
        return not self.errors


def validate_file(ctx: ValidationContext, target: Path, rule: Rule) -> None:
    """Validate one target file against *rule*, appending findings to *ctx*."""
    if not target.is_file():
        ctx.add(target, rule.module_name, TYPE_MISSING, "File specified in .rux does not exist")
        return

    content = target.read_text(encoding="utf-8", errors="replace")
    ctx.checked_files += 1
    for validator in FILE_VALIDATORS:
        validator(ctx, target, content, rule)


def check_rules(ctx: ValidationContext, rules: list[Rule]) -> None:
    """Validate the target of every non-inert rule."""
    for rule in rules:
        if rule.is_inert:
            continue
        logger.debug("Checking %s -> %s", rule.module_name or "<unnamed>", rule.location)
        validate_file(ctx, ctx.project_root / rule.location, rule)


def check_project(project_root: Path, *, config: CheckConfig | None = None) -> CheckResult:
    """Run every constraint file under *project_root* against its target.

    Parameters
    ----------
    project_root:
        Directory searched for constraint files; rule locations are
        resolved relative to it.
    config:
        Settings to use.  When *None*, ``rubric.yml`` is loaded from
        *project_root* (or defaults are used).

    Returns
    -------
    CheckResult
        Violations, counts, parse diagnostics and timing.

    Raises
    ------
    OSError
        When the project tree cannot be traversed.
    """
    start = time.monotonic()
    if config is None:
        config = load_config(project_root)

    ctx = ValidationContext(project_root=project_root, config=config)
    rule_files = find_rule_files(
        project_root, suffix=config.rule_suffix, ignore_dirs=config.ignore_dirs
    )

    rules: list[Rule] = []
    diagnostics: dict[str, tuple[ParseDiagnostic, ...]] = {}
    for rule_file in rule_files:
        parsed = load_rule(rule_file)
        if parsed.diagnostics:
            display = ctx.display_path(rule_file)
            diagnostics[display] = parsed.diagnostics
            for diagnostic in parsed.diagnostics:
                logger.warning("%s:%s", display, diagnostic)
        rules.append(parsed.rule)

    check_rules(ctx, rules)

    elapsed = (time.monotonic() - start) * 1000
    return CheckResult(
        violations=list(ctx.violations),
        rules_evaluated=len(rules),
        files_checked=ctx.checked_files,
        diagnostics=diagnostics,
        elapsed_ms=elapsed,
    )
