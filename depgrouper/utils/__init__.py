"""
Utility helpers for depgrouper.

This package provides reusable utilities used across depgrouper, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem helpers for requirements discovery

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from depgrouper.utils.filesystem import (
    find_requirements_files,
    resolve_job_directory,
    safe_read_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from depgrouper.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
    verbosity_to_level,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from depgrouper.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_group_table,
    print_warning,
    reconfigure_console,
)

__all__ = [
    # Console
    "print_error",
    "print_group_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "verbosity_to_level",
    # Filesystem
    "safe_read_file",
    "find_requirements_files",
    "resolve_job_directory",
]
