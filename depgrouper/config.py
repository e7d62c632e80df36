"""Job configuration loader for depgrouper.

Handles discovery, loading, parsing, and validation of the update job
description. Supports two formats:

- ``depgrouper.toml`` — settings under ``[depgrouper]`` table
- ``pyproject.toml`` — settings under ``[tool.depgrouper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``DEPGROUPER_CONFIG``
2. ``depgrouper.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.depgrouper]`` section

Example (``depgrouper.toml``)::

    [depgrouper]
    package-manager = "pip"
    directories = ["/backend", "/worker"]
    security-updates-only = false

    [[depgrouper.groups]]
    name = "web"
    patterns = ["django*", "flask*"]
    exclude-patterns = ["django-debug-toolbar"]
    dependency-type = "production"
    update-types = ["minor", "patch"]
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import tomli as tomllib

from depgrouper.models import Job, Source
from depgrouper.exceptions import ConfigError
from depgrouper.utils.logger import get_logger
from depgrouper.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_DIRECTORY,
    DEFAULT_PACKAGE_MANAGER,
    DEPENDENCY_TYPES,
    PYPROJECT_FILE_NAME,
    RULE_DEPENDENCY_TYPE,
    RULE_EXCLUDE_PATTERNS,
    RULE_PATTERNS,
    RULE_UPDATE_TYPES,
    UPDATE_TYPES,
)

logger = get_logger("config")

_KNOWN_TOP = {
    "package-manager",
    "directory",
    "directories",
    "security-updates-only",
    "updating-a-pull-request",
    "dependency-group-to-refresh",
    "groups",
}

_KNOWN_GROUP = {
    "name",
    RULE_PATTERNS,
    RULE_EXCLUDE_PATTERNS,
    RULE_DEPENDENCY_TYPE,
    RULE_UPDATE_TYPES,
}


@dataclass
class DepGrouperConfig:
    """Parsed and validated update job configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        package_manager: Ecosystem identifier used to name synthesized groups.
        directory: Single job directory.
        directories: Job directories when the job spans several.
        security_updates_only: Only apply security fixes.
        updating_a_pull_request: Refresh an existing pull request.
        dependency_group_to_refresh: Group whose pull request is refreshed.
        groups: Declared groups as ``{"name": ..., "rules": {...}}``.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    package_manager: str = DEFAULT_PACKAGE_MANAGER
    directory: str = DEFAULT_DIRECTORY
    directories: Optional[List[str]] = None
    security_updates_only: bool = False
    updating_a_pull_request: bool = False
    dependency_group_to_refresh: Optional[str] = None
    groups: List[Dict[str, Any]] = field(default_factory=list)

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "package_manager": self.package_manager,
            "directory": self.directory,
            "directories": self.directories,
            "security_updates_only": self.security_updates_only,
            "updating_a_pull_request": self.updating_a_pull_request,
            "dependency_group_to_refresh": self.dependency_group_to_refresh,
            "groups": [group["name"] for group in self.groups],
        }

    def to_job(self) -> Job:
        """Build a fresh :class:`Job` from this configuration.

        Group descriptors are copied, so synthesizing a group on the job
        leaves the configuration untouched.
        """
        return Job(
            package_manager=self.package_manager,
            source=Source(
                directory=self.directory,
                directories=list(self.directories) if self.directories else None,
            ),
            dependency_groups=[
                {"name": group["name"], "rules": dict(group["rules"])}
                for group in self.groups
            ],
            security_updates_only=self.security_updates_only,
            updating_a_pull_request=self.updating_a_pull_request,
            dependency_group_to_refresh=self.dependency_group_to_refresh,
        )


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    dedicated = cwd / CONFIG_FILE_NAME
    if dedicated.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, dedicated)
        return dedicated

    pyproject = cwd / PYPROJECT_FILE_NAME
    if pyproject.is_file() and _pyproject_has_depgrouper_section(pyproject):
        logger.debug("Found [tool.depgrouper] in pyproject.toml: %s", pyproject)
        return pyproject

    logger.debug("No configuration file found")
    return None


def _pyproject_has_depgrouper_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.depgrouper]`` section.

    Parse errors count as "no section" so that a broken pyproject.toml
    unrelated to depgrouper does not stop discovery.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "depgrouper" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> DepGrouperConfig:
    """Load and validate the job configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`DepGrouperConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return DepGrouperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == PYPROJECT_FILE_NAME:
        section = raw.get("tool", {}).get("depgrouper", {})
    else:
        section = raw.get("depgrouper", {})

    if not section:
        logger.debug("Config file found but no depgrouper section, using defaults")
        return DepGrouperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _expect_bool(value: Any, option: str, config_path: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(
            f"{option} must be a boolean, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    return value


def _expect_str(value: Any, option: str, config_path: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(
            f"{option} must be a non-empty string, got {value!r}",
            config_path=config_path,
            option=option,
        )
    return value


def _expect_str_list(value: Any, option: str, config_path: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(
            f"{option} must be a list of strings",
            config_path=config_path,
            option=option,
        )
    return list(value)


def _expect_choices(
    values: List[str],
    choices: Any,
    option: str,
    config_path: str,
) -> None:
    invalid = sorted(set(values) - set(choices))
    if invalid:
        raise ConfigError(
            f"{option} has invalid value(s) {', '.join(invalid)}; "
            f"expected one of {', '.join(choices)}",
            config_path=config_path,
            option=option,
        )


def _parse_group(raw: Any, index: int, *, config_path: str) -> Dict[str, Any]:
    """Validate one ``[[groups]]`` entry and split it into name and rules."""
    option = f"groups[{index}]"
    if not isinstance(raw, dict):
        raise ConfigError(
            f"{option} must be a table",
            config_path=config_path,
            option=option,
        )

    unknown = set(raw.keys()) - _KNOWN_GROUP
    if unknown:
        raise ConfigError(
            f"Unknown keys in {option}: {', '.join(sorted(unknown))}",
            config_path=config_path,
            option=option,
        )

    if "name" not in raw:
        raise ConfigError(
            f"{option} is missing a name",
            config_path=config_path,
            option=option,
        )
    name = _expect_str(raw["name"], f"{option}.name", config_path)

    rules: Dict[str, Any] = {}
    for key in (RULE_PATTERNS, RULE_EXCLUDE_PATTERNS, RULE_UPDATE_TYPES):
        if key in raw:
            rules[key] = _expect_str_list(raw[key], f"{option}.{key}", config_path)

    if RULE_UPDATE_TYPES in rules:
        _expect_choices(
            rules[RULE_UPDATE_TYPES],
            UPDATE_TYPES,
            f"{option}.{RULE_UPDATE_TYPES}",
            config_path,
        )

    if RULE_DEPENDENCY_TYPE in raw:
        dependency_type = _expect_str(
            raw[RULE_DEPENDENCY_TYPE], f"{option}.{RULE_DEPENDENCY_TYPE}", config_path
        )
        _expect_choices(
            [dependency_type],
            DEPENDENCY_TYPES,
            f"{option}.{RULE_DEPENDENCY_TYPE}",
            config_path,
        )
        rules[RULE_DEPENDENCY_TYPE] = dependency_type

    return {"name": name, "rules": rules}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> DepGrouperConfig:
    """Parse and validate the depgrouper configuration section.

    Rejects unknown keys, type mismatches and duplicate group names.

    Raises:
        ConfigError: Naming the offending option.
    """
    config = DepGrouperConfig()

    unknown_top = set(section.keys()) - _KNOWN_TOP
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "package-manager" in section:
        config.package_manager = _expect_str(
            section["package-manager"], "package-manager", config_path
        )

    if "directory" in section:
        config.directory = _expect_str(section["directory"], "directory", config_path)

    if "directories" in section:
        config.directories = _expect_str_list(
            section["directories"], "directories", config_path
        )

    if "security-updates-only" in section:
        config.security_updates_only = _expect_bool(
            section["security-updates-only"], "security-updates-only", config_path
        )

    if "updating-a-pull-request" in section:
        config.updating_a_pull_request = _expect_bool(
            section["updating-a-pull-request"], "updating-a-pull-request", config_path
        )

    if "dependency-group-to-refresh" in section:
        config.dependency_group_to_refresh = _expect_str(
            section["dependency-group-to-refresh"],
            "dependency-group-to-refresh",
            config_path,
        )

    if "groups" in section:
        raw_groups = section["groups"]
        if not isinstance(raw_groups, list):
            raise ConfigError(
                "groups must be an array of tables",
                config_path=config_path,
                option="groups",
            )

        seen = set()
        for index, raw in enumerate(raw_groups):
            group = _parse_group(raw, index, config_path=config_path)
            if group["name"] in seen:
                raise ConfigError(
                    f"Duplicate group name: {group['name']}",
                    config_path=config_path,
                    option=f"groups[{index}].name",
                )
            seen.add(group["name"])
            config.groups.append(group)

    return config
