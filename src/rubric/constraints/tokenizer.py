"""Tokenizer for the .rux constraint DSL.

Produces a flat token stream with 1-based line/column positions.  Malformed
input never raises: unknown characters and unterminated strings are reported
as :class:`ParseDiagnostic` entries and scanning resumes after them.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Token kinds
# ---------------------------------------------------------------------------

IDENT = "ident"
STRING = "string"
NUMBER = "number"
PUNCT = "punct"

PUNCTUATION: frozenset[str] = frozenset("{}[](),:@><=;")

_ESCAPES: dict[str, str] = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}

# Only ASCII digits start a number; other Unicode digits lex as identifier characters.
DIGITS: frozenset[str] = frozenset("0123456789")


@dataclass(frozen=True)
class Token:
    """A single lexical token."""

    kind: str  # "ident" | "string" | "number" | "punct"
    value: str
    line: int
    column: int

    def is_punct(self, char: str) -> bool:
        return self.kind == PUNCT and self.value == char

    def is_ident(self, name: str | None = None) -> bool:
        return self.kind == IDENT and (name is None or self.value == name)


@dataclass(frozen=True)
class ParseDiagnostic:
    """A non-fatal problem found while reading constraint text."""

    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"


def _is_ident_char(char: str) -> bool:
    return char.isalnum() or char in "_.*$-"


def tokenize(text: str) -> tuple[list[Token], list[ParseDiagnostic]]:
    """Split *text* into tokens.

    Returns the tokens and any diagnostics produced along the way.
    Comments (``//``, ``#`` and ``/* */``) are dropped.
    """
    tokens: list[Token] = []
    diagnostics: list[ParseDiagnostic] = []

    pos = 0
    line = 1
    line_start = 0
    length = len(text)

    while pos < length:
        char = text[pos]
        column = pos - line_start + 1

        if char == "\n":
            pos += 1
            line += 1
            line_start = pos
            continue
        if char.isspace():
            pos += 1
            continue

        # Comments
        if char == "#" or text.startswith("//", pos):
            end = text.find("\n", pos)
            pos = length if end == -1 else end
            continue
        if text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            if end == -1:
                diagnostics.append(ParseDiagnostic(line, column, "unterminated block comment"))
                end = length
            else:
                end += 2
            line += text.count("\n", pos, end)
            newline = text.rfind("\n", pos, end)
            if newline != -1:
                line_start = newline + 1
            pos = end
            continue

        if char == '"':
            value, pos, closed = _read_string(text, pos + 1)
            if not closed:
                diagnostics.append(ParseDiagnostic(line, column, "unterminated string"))
            tokens.append(Token(STRING, value, line, column))
            continue

        if char in DIGITS:
            start = pos
            while pos < length and text[pos] in DIGITS:
                pos += 1
            if pos < length and _is_ident_char(text[pos]):
                # e.g. "10abc": read the rest as an identifier
                while pos < length and _is_ident_char(text[pos]):
                    pos += 1
                tokens.append(Token(IDENT, text[start:pos], line, column))
            else:
                tokens.append(Token(NUMBER, text[start:pos], line, column))
            continue

        if _is_ident_char(char):
            start = pos
            while pos < length and _is_ident_char(text[pos]):
                pos += 1
            tokens.append(Token(IDENT, text[start:pos], line, column))
            continue

        if char in PUNCTUATION:
            tokens.append(Token(PUNCT, char, line, column))
            pos += 1
            continue

        diagnostics.append(ParseDiagnostic(line, column, f"unexpected character {char!r}"))
        pos += 1

    return tokens, diagnostics


def _read_string(text: str, pos: int) -> tuple[str, int, bool]:
    """Read a double-quoted string body starting after the opening quote.

    Strings end at the closing quote or, when unterminated, at the end of
    the line.  Returns ``(value, next_pos, closed)``.
    """
    chars: list[str] = []
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == '"':
            return "".join(chars), pos + 1, True
        if char == "\n":
            return "".join(chars), pos, False
        if char == "\\" and pos + 1 < length and text[pos + 1] != "\n":
            nxt = text[pos + 1]
            chars.append(_ESCAPES.get(nxt, "\\" + nxt))
            pos += 2
            continue
        chars.append(char)
        pos += 1
    return "".join(chars), pos, False
