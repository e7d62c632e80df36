"""
Update job data model for depgrouper.

A :class:`Job` describes one dependency-update run: which package manager
and directories it covers, the dependency groups the user declared, and
whether it is a security-only run or a refresh of an existing pull
request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from depgrouper.constants import DEFAULT_DIRECTORY


@dataclass
class Source:
    """Repository location of the manifests an update job works on.

    Attributes:
        directory: Single job directory, used when ``directories`` is unset.
        directories: Multiple job directories, if the job spans several.
    """

    directory: str = DEFAULT_DIRECTORY
    directories: Optional[List[str]] = None

    @property
    def all_directories(self) -> List[str]:
        """Directories to scan, in declaration order."""
        if self.directories:
            return list(self.directories)
        return [self.directory]


@dataclass
class Job:
    """A single dependency-update job.

    Attributes:
        package_manager: Ecosystem identifier, e.g. ``"pip"``.
        source: Directories covered by the job.
        dependency_groups: Declared groups as ``{"name": ..., "rules": ...}``
            mappings. The grouping engine may append a synthesized group.
        security_updates_only: Only security fixes are applied.
        updating_a_pull_request: The job refreshes an existing pull request
            rather than opening new ones.
        dependency_group_to_refresh: Name of the group whose pull request is
            being refreshed, if any.
    """

    package_manager: str
    source: Source = field(default_factory=Source)
    dependency_groups: List[Dict[str, Any]] = field(default_factory=list)
    security_updates_only: bool = False
    updating_a_pull_request: bool = False
    dependency_group_to_refresh: Optional[str] = None

    def override_group_to_refresh_due_to_old_defaults(self, group_name: str) -> None:
        """Point a refresh at ``group_name``.

        Pull requests opened before multi-directory security runs were
        grouped by default carry no group name; this redirects their
        refresh to the synthesized group.
        """
        self.dependency_group_to_refresh = group_name
