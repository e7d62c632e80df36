"""
Centralized constants for depgrouper.

This module defines immutable configuration values used across depgrouper,
including configuration defaults, group rule keys, requirement file
patterns, and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# Configuration files
# ---------------------------------------------------------------------------

#: Dedicated configuration file name (settings under ``[depgrouper]``).
CONFIG_FILE_NAME: Final[str] = "depgrouper.toml"

#: Shared project file (settings under ``[tool.depgrouper]``).
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"

#: Package manager assumed when the configuration does not name one.
DEFAULT_PACKAGE_MANAGER: Final[str] = "pip"

#: Source directory assumed when the configuration does not name one.
DEFAULT_DIRECTORY: Final[str] = "/"

# ---------------------------------------------------------------------------
# Dependency group rules
# ---------------------------------------------------------------------------

#: Rule key holding inclusion patterns.
RULE_PATTERNS: Final[str] = "patterns"

#: Rule key holding exclusion patterns.
RULE_EXCLUDE_PATTERNS: Final[str] = "exclude-patterns"

#: Rule key restricting a group to production or development dependencies.
RULE_DEPENDENCY_TYPE: Final[str] = "dependency-type"

#: Rule key restricting the semver levels a group updates.
RULE_UPDATE_TYPES: Final[str] = "update-types"

#: Accepted values for the ``dependency-type`` rule.
DEPENDENCY_TYPES: Final[Sequence[str]] = ("production", "development")

#: Accepted values for the ``update-types`` rule.
UPDATE_TYPES: Final[Sequence[str]] = ("major", "minor", "patch")

#: Pattern that matches every dependency name.
MATCH_ALL_PATTERN: Final[str] = "*"

#: Name template for the catch-all group of multi-directory security runs.
SYNTHETIC_GROUP_NAME_TEMPLATE: Final[str] = "{package_manager} group"

# ---------------------------------------------------------------------------
# Requirement file patterns and directives
# ---------------------------------------------------------------------------

#: Glob patterns used to detect supported requirement files.
REQUIREMENT_FILE_PATTERNS: Final[Mapping[str, Sequence[str]]] = {
    "requirements": (
        "requirements.txt",
        "requirements-*.txt",
        "requirements/*.txt",
    ),
}

#: File name fragments marking a requirements file as development-only.
DEVELOPMENT_FILE_MARKERS: Final[Sequence[str]] = ("dev", "test")

#: Comment prefix in requirements files.
COMMENT_PREFIX: Final[str] = "#"

#: Prefix shared by every pip option line (``-r``, ``--hash`` ...).
OPTION_PREFIX: Final[str] = "-"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading requirement files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
