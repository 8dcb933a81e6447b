"""Checker configuration: optional ``rubric.yml`` at the project root."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import yaml

from rubric.constraints.discovery import DEFAULT_IGNORE_DIRS, DEFAULT_RULE_SUFFIX

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "rubric.yml"

# Target paths containing any of these are never scanned for business logic:
# the standalone rubric/validate.js runner and test/spec files.
DEFAULT_BUSINESS_LOGIC_SKIP: tuple[str, ...] = ("validate.js", ".test.", ".spec.")


class ConfigError(Exception):
    """Raised when an explicitly requested config file cannot be used."""


@dataclass(frozen=True)
class CheckConfig:
    """Tunable settings for a check run.

    Configurable via ``rubric.yml``; every key is optional.
    """

    rule_suffix: str = DEFAULT_RULE_SUFFIX
    ignore_dirs: tuple[str, ...] = tuple(sorted(DEFAULT_IGNORE_DIRS))
    utils_marker: str = "/utils/"
    business_logic_skip: tuple[str, ...] = DEFAULT_BUSINESS_LOGIC_SKIP
    max_state_hooks: int = 5
    max_effect_hooks: int = 2


def _str_tuple(value: object, default: tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        return tuple(str(item) for item in value)
    return default


def config_from_dict(data: dict[str, Any]) -> CheckConfig:
    """Build a :class:`CheckConfig` from parsed YAML, keeping defaults for missing keys."""
    defaults = CheckConfig()

    unused = data.get("unused_exports")
    if not isinstance(unused, dict):
        unused = {}
    business = data.get("business_logic")
    if not isinstance(business, dict):
        business = {}

    try:
        max_state_hooks = int(business.get("max_state_hooks", defaults.max_state_hooks))
        max_effect_hooks = int(business.get("max_effect_hooks", defaults.max_effect_hooks))
    except (TypeError, ValueError) as exc:
        msg = f"business_logic hook limits must be integers: {exc}"
        raise ConfigError(msg) from exc

    return CheckConfig(
        rule_suffix=str(data.get("rule_suffix", defaults.rule_suffix)),
        ignore_dirs=_str_tuple(data.get("ignore_dirs"), defaults.ignore_dirs),
        utils_marker=str(unused.get("location", defaults.utils_marker)),
        business_logic_skip=_str_tuple(business.get("skip"), defaults.business_logic_skip),
        max_state_hooks=max_state_hooks,
        max_effect_hooks=max_effect_hooks,
    )


def load_config(project_root: Path, config_path: Path | None = None) -> CheckConfig:
    """Load checker settings.

    When *config_path* is given the file must exist and be valid YAML,
    otherwise :class:`ConfigError` is raised.  Without it,
    ``<project_root>/rubric.yml`` is used if present, falling back to
    defaults (with a logged warning) when it cannot be read or holds
    invalid values.
    """
    explicit = config_path is not None
    path = config_path if config_path is not None else project_root / CONFIG_FILENAME

    if not path.is_file():
        if explicit:
            msg = f"config file not found: {path}"
            raise ConfigError(msg)
        return CheckConfig()

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        if explicit:
            msg = f"cannot read {path}: {exc}"
            raise ConfigError(msg) from exc
        logger.warning("Failed to read %s, using default settings", path)
        return CheckConfig()

    if data is None:
        return CheckConfig()
    if not isinstance(data, dict):
        if explicit:
            msg = f"{path}: top level must be a mapping"
            raise ConfigError(msg)
        logger.warning("%s is not a mapping, using default settings", path)
        return CheckConfig()

    try:
        return config_from_dict(data)
    except ConfigError as exc:
        if explicit:
            raise
        logger.warning("%s: %s, using default settings", path, exc)
        return CheckConfig()
