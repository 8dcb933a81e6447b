"""Violation model and the run-scoped validation context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rubric.config import CheckConfig

if TYPE_CHECKING:
    from pathlib import Path

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

TYPE_MISSING = "missing"
TYPE_FILE_SIZE = "file-size"
TYPE_IMPORT = "import"
TYPE_OPERATION = "operation"
TYPE_EXPORT = "export"
TYPE_UNUSED_EXPORT = "unused-export"
TYPE_BUSINESS_LOGIC = "business-logic"
TYPE_PATTERN = "pattern"

VIOLATION_TYPES: frozenset[str] = frozenset(
    {
        TYPE_MISSING,
        TYPE_FILE_SIZE,
        TYPE_IMPORT,
        TYPE_OPERATION,
        TYPE_EXPORT,
        TYPE_UNUSED_EXPORT,
        TYPE_BUSINESS_LOGIC,
        TYPE_PATTERN,
    }
)


@dataclass(frozen=True)
class Violation:
    """A single deviation of a source file from its rule."""

    file: str
    module: str
    type: str  # one of VIOLATION_TYPES
    message: str
    line: int | None = None  # None for file-level findings
    severity: str = SEVERITY_ERROR  # "error" | "warning"

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR

    def to_dict(self) -> dict[str, object]:
        return {
            "file": self.file,
            "module": self.module,
            "type": self.type,
            "message": self.message,
            "line": self.line,
            "severity": self.severity,
        }


@dataclass
class ValidationContext:
    """Mutable state for one check run, passed by reference into every validator."""

    project_root: Path
    config: CheckConfig = field(default_factory=CheckConfig)
    violations: list[Violation] = field(default_factory=list)
    checked_files: int = 0

    def display_path(self, path: Path) -> str:
        """Return *path* relative to the project root when possible."""
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return path.as_posix()

    def add(
        self,
        file: Path,
        module: str,
        type_: str,
        message: str,
        line: int | None = None,
        severity: str = SEVERITY_ERROR,
    ) -> Violation:
        violation = Violation(
            file=self.display_path(file),
            module=module,
            type=type_,
            message=message,
            line=line,
            severity=severity,
        )
        self.violations.append(violation)
        return violation
