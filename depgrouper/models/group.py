"""
Dependency group model for depgrouper.

A :class:`DependencyGroup` is a named bucket described by user rules. It
owns the membership predicate used by the grouping engine and accumulates
the dependencies assigned to it.

Supported rule keys::

    patterns          names to include ("*" is a wildcard), default: all
    exclude-patterns  names to leave out, checked before ``patterns``
    dependency-type   "production" or "development", default: both
    update-types      semver levels the group updates, default: all
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from depgrouper.models.dependency import Dependency
from depgrouper.constants import (
    RULE_DEPENDENCY_TYPE,
    RULE_EXCLUDE_PATTERNS,
    RULE_PATTERNS,
    RULE_UPDATE_TYPES,
    UPDATE_TYPES,
)


def compile_wildcard(pattern: str) -> re.Pattern[str]:
    """Compile a name pattern where ``*`` matches any run of characters.

    Every other character is literal. Matching is case-insensitive and
    anchored to the whole name.
    """
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(f"^{body}$", re.IGNORECASE)


class DependencyGroup:
    """A user-declared (or synthesized) group of dependencies.

    Args:
        name: Group name, unique within a job.
        rules: Matching rules, see module docstring.
    """

    __slots__ = ("name", "rules", "dependencies", "_patterns", "_exclude_patterns")

    def __init__(self, name: str, rules: Optional[Mapping[str, Any]] = None) -> None:
        self.name: str = name
        self.rules: Dict[str, Any] = dict(rules or {})
        self.dependencies: List[Dependency] = []

        self._patterns: Optional[List[re.Pattern[str]]] = None
        if RULE_PATTERNS in self.rules:
            self._patterns = [compile_wildcard(p) for p in self.rules[RULE_PATTERNS]]
        self._exclude_patterns: List[re.Pattern[str]] = [
            compile_wildcard(p) for p in self.rules.get(RULE_EXCLUDE_PATTERNS, [])
        ]

    def contains(self, dependency: Dependency) -> bool:
        """Return True if ``dependency`` belongs to this group."""
        if dependency in self.dependencies:
            return True
        if self._matches_excluded_pattern(dependency.name):
            return False

        return self._matches_pattern(dependency.name) and self._matches_dependency_type(
            dependency
        )

    @property
    def update_types(self) -> List[str]:
        return list(self.rules.get(RULE_UPDATE_TYPES, UPDATE_TYPES))

    @property
    def targets_highest_versions_only(self) -> bool:
        """True when the group may move dependencies across major versions."""
        return RULE_UPDATE_TYPES not in self.rules or "major" in self.update_types

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "rules": dict(self.rules),
            "dependencies": [dep.name for dep in self.dependencies],
        }

    def _matches_pattern(self, name: str) -> bool:
        if self._patterns is None:
            return True
        return any(pattern.match(name) for pattern in self._patterns)

    def _matches_excluded_pattern(self, name: str) -> bool:
        return any(pattern.match(name) for pattern in self._exclude_patterns)

    def _matches_dependency_type(self, dependency: Dependency) -> bool:
        dependency_type = self.rules.get(RULE_DEPENDENCY_TYPE)
        if dependency_type is None:
            return True
        if dependency_type == "production":
            return dependency.production
        if dependency_type == "development":
            return not dependency.production
        return False

    def __repr__(self) -> str:
        return (
            "DependencyGroup("
            f"name={self.name!r}, "
            f"rules={self.rules!r}, "
            f"dependencies={len(self.dependencies)!r}"
            ")"
        )
