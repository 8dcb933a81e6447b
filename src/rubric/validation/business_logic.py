"""Business-logic leakage detector for UI components.

Presentation components are expected to render, not to fetch, persist or
compute domain results.  The detector classifies a component from its rule
and source text, then scans presentation components with a declarative
catalogue of :class:`LogicSignature` entries.  Each signature may carry an
exclusion predicate evaluated against the match and a fixed-width context
window around it, which keeps ordinary UI code (submit handlers, input
formatting, visibility toggles) from being reported.

Container components get two structural checks instead: an error boundary
is required and effect hooks are forbidden.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rubric.constraints.model import CONTAINER, PRESENTATION
from rubric.validation.patterns import line_number_at
from rubric.validation.violations import (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    TYPE_BUSINESS_LOGIC,
    TYPE_PATTERN,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from rubric.constraints.model import Rule
    from rubric.validation.violations import ValidationContext

logger = logging.getLogger(__name__)

CONTEXT_RADIUS = 50
EXCERPT_LENGTH = 50

# ---------------------------------------------------------------------------
# UI-specific naming families (never penalized at warning level)
# ---------------------------------------------------------------------------

UI_SPECIFIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    # form validation
    re.compile(r"validate\w*(?:Email|Phone|Password|Field|Input|Form)", re.IGNORECASE),
    # input formatting
    re.compile(r"format\w*(?:Phone|Date|Currency|Input|Display)", re.IGNORECASE),
    # visibility / UI state toggles
    re.compile(
        r"(?:is|has|show|hide|toggle)\w*(?:Open|Visible|Active|Disabled|Loading|Submitting)",
        re.IGNORECASE,
    ),
    # display truncation
    re.compile(r"(?:truncate|ellipsis|excerpt|preview)", re.IGNORECASE),
    # styling
    re.compile(r"(?:className|cssClass|style|variant)", re.IGNORECASE),
    # event handlers
    re.compile(r"handle(?:Click|Change|Submit|Focus|Blur|Key)", re.IGNORECASE),
    # simple length checks
    re.compile(r"\.\s*length\s*[<>]=?\s*\d+"),
)

SUBMIT_HANDLER_NAMES: tuple[str, ...] = (
    "handleSubmit",
    "onSubmit",
    "handleSave",
    "handleLogin",
    "handleSignup",
    "handleBudgetUpdate",
)


def is_ui_specific(snippet: str | None) -> bool:
    """Return True if *snippet* names UI-local logic."""
    if not snippet:
        return False
    return any(pattern.search(snippet) for pattern in UI_SPECIFIC_PATTERNS)


# ---------------------------------------------------------------------------
# Exclusion predicates: (match, context window) -> skip?
# ---------------------------------------------------------------------------


def _span_lines(match: re.Match[str]) -> int:
    return match.group(0).count("\n") + 1


def _in_submit_handler(match: re.Match[str], context: str) -> bool:
    return any(name in context for name in SUBMIT_HANDLER_NAMES)


def _in_any_submit_handler(match: re.Match[str], context: str) -> bool:
    return _in_submit_handler(match, context) or ("handle" in context and "submit" in context)


def _short_submit_try(match: re.Match[str], context: str) -> bool:
    return _span_lines(match) < 5 and "submit" in context


def _short_reduce(match: re.Match[str], context: str) -> bool:
    return _span_lines(match) < 3


def _ui_function_name(match: re.Match[str], context: str) -> bool:
    return is_ui_specific(match.group(1))


# ---------------------------------------------------------------------------
# Signature catalogue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LogicSignature:
    """One heuristic: a pattern, what to say about it, and when to let it pass."""

    name: str
    pattern: re.Pattern[str]
    message: str
    severity: str
    exclude: Callable[[re.Match[str], str], bool] | None = None


SIGNATURES: tuple[LogicSignature, ...] = (
    LogicSignature(
        "async-function",
        re.compile(r"async\s+(?:function|\()"),
        "Async operations should be in services or custom hooks",
        SEVERITY_ERROR,
        _in_submit_handler,
    ),
    LogicSignature(
        "promise-then",
        re.compile(r"\.then\s*\("),
        "Promise handling should be in services or custom hooks",
        SEVERITY_ERROR,
    ),
    LogicSignature(
        "await",
        re.compile(r"await\s+"),
        "Await operations should be in services or custom hooks",
        SEVERITY_ERROR,
        _in_any_submit_handler,
    ),
    LogicSignature(
        "try-catch",
        re.compile(r"try\s*\{\s*[\s\S]*?\}\s*catch"),
        "Complex error handling should be in services or custom hooks",
        SEVERITY_WARNING,
        _short_submit_try,
    ),
    LogicSignature(
        "fetch",
        re.compile(r"fetch\s*\("),
        "API calls must not be in presentation components",
        SEVERITY_ERROR,
    ),
    LogicSignature(
        "storage",
        re.compile(r"localStorage\.|sessionStorage\."),
        "Storage operations must not be in presentation components",
        SEVERITY_ERROR,
    ),
    LogicSignature(
        "reduce-transform",
        re.compile(r"\.reduce\s*\(\s*\([^)]*\)\s*=>\s*\{[\s\S]*?\}\s*,"),
        "Complex data transformations should be in utilities or services",
        SEVERITY_WARNING,
        _short_reduce,
    ),
    LogicSignature(
        "long-function",
        re.compile(r"function\s+(\w+)\s*\([^)]*\)\s*\{\s*(?:(?!return)[^}]){50,}"),
        "Complex functions should be extracted to hooks or services",
        SEVERITY_WARNING,
        _ui_function_name,
    ),
    # Domain naming families
    LogicSignature(
        "currency-conversion",
        re.compile(r"(?:convert|exchange|transform)(?:Currency|Amount|Rate)", re.IGNORECASE),
        "Currency business logic should be in services",
        SEVERITY_ERROR,
    ),
    LogicSignature(
        "financial-calculation",
        re.compile(
            r"(?:calculate|compute)(?:Tax|Total|Discount|Price|Cost|Budget)", re.IGNORECASE
        ),
        "Financial calculations should be in utilities or services",
        SEVERITY_ERROR,
    ),
    LogicSignature(
        "domain-validation",
        re.compile(r"(?:validate|verify)(?:Budget|Expense|Transaction|Approval)", re.IGNORECASE),
        "Domain validation should be in services",
        SEVERITY_ERROR,
    ),
    LogicSignature(
        "document-processing",
        re.compile(r"(?:process|parse|extract)(?:Receipt|Invoice|Document|Data)", re.IGNORECASE),
        "Document processing should be in services",
        SEVERITY_ERROR,
    ),
    LogicSignature(
        "report-generation",
        re.compile(r"(?:generate|create)(?:Report|Export|PDF|CSV)", re.IGNORECASE),
        "Report generation should be in services",
        SEVERITY_ERROR,
    ),
)

_STATE_HOOK_RE = re.compile(r"useState\s*(?:<[^>]+>)?\s*\(")
_EFFECT_HOOK_RE = re.compile(r"useEffect\s*\(")


@dataclass(frozen=True)
class LogicFinding:
    """A signature match that survived its exclusions."""

    signature: LogicSignature
    line: int
    excerpt: str

    @property
    def message(self) -> str:
        return f'{self.signature.message}. Found: "{self.excerpt}..."'


def _context_window(content: str, match: re.Match[str]) -> str:
    start = max(0, match.start() - CONTEXT_RADIUS)
    end = min(len(content), match.end() + CONTEXT_RADIUS)
    return content[start:end].replace("\n", " ").strip()


def find_business_logic(
    content: str, signatures: Sequence[LogicSignature] = SIGNATURES
) -> list[LogicFinding]:
    """Apply *signatures* to *content* and return the surviving matches, in catalogue order."""
    findings: list[LogicFinding] = []
    for signature in signatures:
        for match in signature.pattern.finditer(content):
            context = _context_window(content, match)
            if signature.exclude is not None and signature.exclude(match, context):
                continue
            if signature.severity == SEVERITY_WARNING and is_ui_specific(context):
                continue
            findings.append(
                LogicFinding(
                    signature=signature,
                    line=line_number_at(content, match.start()),
                    excerpt=match.group(0)[:EXCERPT_LENGTH],
                )
            )
    return findings


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ComponentClass:
    """How a component is treated by the detector."""

    presentation: bool
    root_or_container: bool

    @property
    def scanned(self) -> bool:
        """Only presentation components outside the root/container exemption are scanned."""
        return self.presentation and not self.root_or_container


def classify_component(rule: Rule, content: str) -> ComponentClass:
    """Classify a component from its rule and source text."""
    presentation = (
        rule.component_type == PRESENTATION
        or "Pure presentation component" in content
        or 'type: "presentation"' in content
        or (
            "useStore" not in content
            and "Service" not in content
            and any("stores" in d or "services" in d for d in rule.denied_imports)
        )
    )
    root_or_container = (
        rule.module_name == "App"
        or "App.tsx" in rule.location
        or "Page.tsx" in rule.location
        or 'type: "container"' in content
    )
    return ComponentClass(presentation=presentation, root_or_container=root_or_container)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_container_structure(
    ctx: ValidationContext, path: Path, content: str, rule: Rule
) -> None:
    """Require an error boundary and forbid effect hooks in container components."""
    if "componentDidCatch" not in content and "ErrorBoundary" not in content:
        ctx.add(
            path,
            rule.module_name,
            TYPE_PATTERN,
            "Container components must implement error boundaries",
        )
    if "useEffect" in content:
        ctx.add(
            path,
            rule.module_name,
            TYPE_PATTERN,
            "Container components should not use useEffect",
        )


def check_hook_complexity(ctx: ValidationContext, path: Path, content: str, rule: Rule) -> None:
    state_hooks = len(_STATE_HOOK_RE.findall(content))
    if state_hooks > ctx.config.max_state_hooks:
        ctx.add(
            path,
            rule.module_name,
            TYPE_BUSINESS_LOGIC,
            f"Too many state hooks ({state_hooks}). "
            "Consider extracting complex state logic to a custom hook",
            severity=SEVERITY_WARNING,
        )

    effect_hooks = len(_EFFECT_HOOK_RE.findall(content))
    if effect_hooks > ctx.config.max_effect_hooks:
        ctx.add(
            path,
            rule.module_name,
            TYPE_BUSINESS_LOGIC,
            f"Multiple useEffect hooks ({effect_hooks}) suggest business logic. "
            "Consider extracting to custom hooks",
            severity=SEVERITY_WARNING,
        )


def validate_business_logic(
    ctx: ValidationContext, path: Path, content: str, rule: Rule
) -> None:
    """Run the component checks for *rule*'s target file."""
    if not rule.is_component:
        return
    display = ctx.display_path(path)
    if any(marker in display for marker in ctx.config.business_logic_skip):
        logger.debug("Skipping business-logic checks for %s", display)
        return

    # Structural checks are not subject to the scanning exemption below.
    if rule.component_type == CONTAINER:
        check_container_structure(ctx, path, content, rule)

    kind = classify_component(rule, content)
    if not kind.scanned:
        logger.debug(
            "%s not scanned (presentation=%s, root_or_container=%s)",
            display,
            kind.presentation,
            kind.root_or_container,
        )
        return

    for finding in find_business_logic(content):
        ctx.add(
            path,
            rule.module_name,
            TYPE_BUSINESS_LOGIC,
            finding.message,
            finding.line,
            finding.signature.severity,
        )
    check_hook_complexity(ctx, path, content, rule)
