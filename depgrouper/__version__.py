"""
depgrouper version information.

This module provides a single source of truth for the package version.
"""

from __future__ import annotations

__version__ = "0.1.0.dev0"

VERSION_STRING = f"depgrouper {__version__}"
