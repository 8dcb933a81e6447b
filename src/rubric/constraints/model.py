"""Rule model: the parsed constraints of one .rux file (no behavior)."""

from __future__ import annotations

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PRESENTATION = "presentation"
CONTAINER = "container"
COMPONENT_TYPES: frozenset[str] = frozenset({PRESENTATION, CONTAINER})

OP_CONSOLE = "io.console.*"
OP_NETWORK = "io.network.*"
OP_LOCAL_STORAGE = "io.localStorage.*"
KNOWN_OPERATIONS: frozenset[str] = frozenset({OP_CONSOLE, OP_NETWORK, OP_LOCAL_STORAGE})

COMPONENT_DIR_MARKER = "/components/"
COMPONENT_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx")


def is_component_location(location: str) -> bool:
    """Return True if *location* points at a UI component file."""
    return COMPONENT_DIR_MARKER in location and location.endswith(COMPONENT_EXTENSIONS)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileConstraints:
    """File-level limits (``deny file.lines > N``)."""

    max_lines: int | None = None


@dataclass(frozen=True)
class Rule:
    """Constraints for one source module, as declared in a .rux file."""

    module_name: str = ""
    location: str = ""
    allowed_imports: tuple[str, ...] = ()
    denied_imports: tuple[str, ...] = ()
    denied_operations: tuple[str, ...] = ()
    denied_exports: tuple[str, ...] = ()
    file_constraints: FileConstraints = field(default_factory=FileConstraints)
    component_type: str = CONTAINER  # "presentation" | "container"

    @property
    def is_component(self) -> bool:
        return is_component_location(self.location)

    @property
    def is_inert(self) -> bool:
        """A rule without a location takes part in no validation."""
        return not self.location

    def to_dict(self) -> dict[str, object]:
        return {
            "module_name": self.module_name,
            "location": self.location,
            "allowed_imports": list(self.allowed_imports),
            "denied_imports": list(self.denied_imports),
            "denied_operations": list(self.denied_operations),
            "denied_exports": list(self.denied_exports),
            "file_constraints": {"max_lines": self.file_constraints.max_lines},
            "is_component": self.is_component,
            "component_type": self.component_type,
        }
