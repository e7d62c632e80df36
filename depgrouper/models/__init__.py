"""
Unified data model exports for depgrouper.

Example:
    >>> from depgrouper.models import Dependency, DependencyGroup, Job
"""

from __future__ import annotations

from depgrouper.models.job import Job, Source
from depgrouper.models.group import DependencyGroup
from depgrouper.models.dependency import Dependency

__all__ = [
    "Dependency",
    "DependencyGroup",
    "Job",
    "Source",
]
