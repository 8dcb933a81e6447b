"""Parser for .rux constraint files.

Each field of a :class:`Rule` is extracted independently by scanning the
token stream for its statement shape, so the order of statements and the
presence of unrelated syntax never affect extraction.  Parsing is lenient:
malformed statements leave their field at its default and add a positioned
:class:`ParseDiagnostic` instead of raising.

Recognized statements::

    module Name {
    location: "src/components/Widget.tsx"
    allow "react" as external
    deny imports ["../stores/*", "../services/*"]
    deny exports ["_*"]
    deny io.console.* @ "No logging in components"
    deny file.lines > 200
    @ "Pure presentation component"
    type: "presentation"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rubric.constraints.model import (
    CONTAINER,
    KNOWN_OPERATIONS,
    PRESENTATION,
    FileConstraints,
    Rule,
)
from rubric.constraints.tokenizer import NUMBER, STRING, ParseDiagnostic, Token, tokenize

if TYPE_CHECKING:
    from pathlib import Path

# Annotations that mark a module as a pure presentation component.
PRESENTATION_ANNOTATIONS: frozenset[str] = frozenset(
    {"Pure presentation component", "Presentation component"}
)

# Longer limits are rejected rather than converted.
MAX_LIMIT_DIGITS = 18


@dataclass(frozen=True)
class ParseResult:
    """A parsed rule together with the diagnostics collected while parsing it."""

    rule: Rule
    diagnostics: tuple[ParseDiagnostic, ...] = ()


# ---------------------------------------------------------------------------
# Internal state
# ---------------------------------------------------------------------------


class _RuleBuilder:
    """Mutable accumulator for rule fields; frozen into a Rule at the end."""

    def __init__(self) -> None:
        self.module_name = ""
        self.location = ""
        self.allowed_imports: list[str] = []
        self.denied_imports: list[str] = []
        self.denied_operations: list[str] = []
        self.denied_exports: list[str] = []
        self.max_lines: int | None = None
        self.component_type = CONTAINER
        self.diagnostics: list[ParseDiagnostic] = []

    def note(self, token: Token, message: str) -> None:
        self.diagnostics.append(ParseDiagnostic(token.line, token.column, message))

    def build(self) -> Rule:
        return Rule(
            module_name=self.module_name,
            location=self.location,
            allowed_imports=tuple(self.allowed_imports),
            denied_imports=tuple(self.denied_imports),
            denied_operations=tuple(self.denied_operations),
            denied_exports=tuple(self.denied_exports),
            file_constraints=FileConstraints(max_lines=self.max_lines),
            component_type=self.component_type,
        )


def _add_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


def _at(tokens: list[Token], index: int) -> Token | None:
    return tokens[index] if index < len(tokens) else None


# ---------------------------------------------------------------------------
# Statement extractors
# ---------------------------------------------------------------------------


def _parse_module(tokens: list[Token], i: int, builder: _RuleBuilder) -> None:
    name = _at(tokens, i + 1)
    brace = _at(tokens, i + 2)
    if name is None or not name.is_ident():
        builder.note(tokens[i], "expected module name after 'module'")
        return
    if brace is None or not brace.is_punct("{"):
        return
    if not builder.module_name:
        builder.module_name = name.value


def _parse_keyed_string(tokens: list[Token], i: int, builder: _RuleBuilder) -> str | None:
    """Return the string of a ``key: "value"`` statement, or None."""
    colon = _at(tokens, i + 1)
    if colon is None or not colon.is_punct(":"):
        return None
    value = _at(tokens, i + 2)
    if value is None or value.kind != STRING:
        builder.note(colon, f"expected string after '{tokens[i].value}:'")
        return None
    return value.value


def _parse_string_list(tokens: list[Token], i: int, builder: _RuleBuilder) -> list[str]:
    """Parse ``[ "a", "b" ]`` starting at *i* (the opening bracket)."""
    opening = _at(tokens, i)
    if opening is None or not opening.is_punct("["):
        builder.note(tokens[i - 1], f"expected '[' after 'deny {tokens[i - 1].value}'")
        return []

    values: list[str] = []
    j = i + 1
    while j < len(tokens):
        token = tokens[j]
        if token.is_punct("]"):
            return values
        if token.kind == STRING:
            values.append(token.value)
        elif not token.is_punct(","):
            builder.note(token, f"unexpected {token.value!r} in pattern list")
            return values
        j += 1
    builder.note(opening, "unterminated pattern list")
    return values


def _parse_file_constraint(
    target: Token, tokens: list[Token], i: int, builder: _RuleBuilder
) -> None:
    if target.value != "file.lines":
        builder.note(target, f"unsupported file constraint '{target.value}'")
        return
    op = _at(tokens, i + 2)
    limit = _at(tokens, i + 3)
    if op is None or not op.is_punct(">") or limit is None or limit.kind != NUMBER:
        builder.note(target, "expected 'file.lines > <number>'")
        return
    if len(limit.value) > MAX_LIMIT_DIGITS:
        builder.note(limit, "invalid line limit")
        return
    if builder.max_lines is None:
        builder.max_lines = int(limit.value)


def _parse_deny(tokens: list[Token], i: int, builder: _RuleBuilder) -> None:
    target = _at(tokens, i + 1)
    if target is None or not target.is_ident():
        builder.note(tokens[i], "expected target after 'deny'")
        return

    name = target.value
    if name == "imports":
        for pattern in _parse_string_list(tokens, i + 2, builder):
            _add_unique(builder.denied_imports, pattern)
    elif name == "exports":
        for pattern in _parse_string_list(tokens, i + 2, builder):
            _add_unique(builder.denied_exports, pattern)
    elif name.startswith("file."):
        _parse_file_constraint(target, tokens, i, builder)
    elif "imports" in name or "exports" in name or "file." in name:
        builder.note(target, f"unsupported denial '{name}'")
    else:
        if name not in KNOWN_OPERATIONS:
            builder.note(target, f"unknown operation '{name}'")
        _add_unique(builder.denied_operations, name)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_rux(text: str) -> ParseResult:
    """Parse constraint text into a :class:`ParseResult`. Never raises."""
    tokens, lex_diagnostics = tokenize(text)
    builder = _RuleBuilder()
    builder.diagnostics.extend(lex_diagnostics)

    for i, token in enumerate(tokens):
        if token.is_ident("module"):
            _parse_module(tokens, i, builder)
        elif token.is_ident("location"):
            location = _parse_keyed_string(tokens, i, builder)
            if location is not None and not builder.location:
                builder.location = location
        elif token.is_ident("allow"):
            pattern = _at(tokens, i + 1)
            if pattern is None or pattern.kind != STRING:
                builder.note(token, "expected import pattern string after 'allow'")
            else:
                _add_unique(builder.allowed_imports, pattern.value)
        elif token.is_ident("deny"):
            _parse_deny(tokens, i, builder)
        elif token.is_punct("@"):
            annotation = _at(tokens, i + 1)
            if (
                annotation is not None
                and annotation.kind == STRING
                and annotation.value in PRESENTATION_ANNOTATIONS
            ):
                builder.component_type = PRESENTATION
        elif token.is_ident("type"):
            if _parse_keyed_string(tokens, i, builder) == PRESENTATION:
                builder.component_type = PRESENTATION

    return ParseResult(rule=builder.build(), diagnostics=_by_position(builder.diagnostics))


def _by_position(diagnostics: list[ParseDiagnostic]) -> tuple[ParseDiagnostic, ...]:
    return tuple(sorted(diagnostics, key=lambda d: (d.line, d.column)))


def parse_rule(text: str) -> Rule:
    """Parse constraint text into a :class:`Rule`, discarding diagnostics."""
    return parse_rux(text).rule


def load_rule(path: Path) -> ParseResult:
    """Read and parse a constraint file.  I/O errors propagate.

    Bytes that are not valid UTF-8 are replaced and reported as a diagnostic
    at the first undecodable byte.
    """
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        line_start = raw.rfind(b"\n", 0, exc.start) + 1
        invalid = ParseDiagnostic(
            raw.count(b"\n", 0, exc.start) + 1,
            exc.start - line_start + 1,
            "invalid UTF-8 byte sequence replaced",
        )
    else:
        return parse_rux(text)
    result = parse_rux(raw.decode("utf-8", errors="replace"))
    return ParseResult(
        rule=result.rule, diagnostics=_by_position([*result.diagnostics, invalid])
    )
