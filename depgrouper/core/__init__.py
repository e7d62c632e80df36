"""
Core functionality exports for depgrouper.

    from depgrouper.core import DependencyGroupEngine
"""

from __future__ import annotations

from depgrouper.core.dependency_reader import DependencyReader
from depgrouper.core.group_engine import (
    DependencyGroupEngine,
    EngineState,
    synthetic_group_for,
)

__all__ = [
    "DependencyGroupEngine",
    "DependencyReader",
    "EngineState",
    "synthetic_group_for",
]
