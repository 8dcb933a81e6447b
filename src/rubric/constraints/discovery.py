"""Constraint-file discovery: walk a project tree for .rux files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_RULE_SUFFIX = ".rux"
DEFAULT_IGNORE_DIRS: frozenset[str] = frozenset({"node_modules"})


def find_rule_files(
    root: Path,
    *,
    suffix: str = DEFAULT_RULE_SUFFIX,
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
) -> list[Path]:
    """Return every constraint file under *root*, depth first, sorted by name.

    Hidden directories (``.git``, ``.venv``, ...) and any directory named in
    *ignore_dirs* are skipped.  Filesystem errors propagate to the caller.
    """
    ignored = frozenset(ignore_dirs)
    found: list[Path] = []
    _walk(root, suffix, ignored, found)
    logger.debug("Found %d %s files under %s", len(found), suffix, root)
    return found


def _walk(directory: Path, suffix: str, ignored: frozenset[str], found: list[Path]) -> None:
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            if entry.name.startswith(".") or entry.name in ignored:
                continue
            _walk(entry, suffix, ignored, found)
        elif entry.name.endswith(suffix):
            found.append(entry)
