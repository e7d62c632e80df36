"""
depgrouper — dependency group assignment for automated update jobs.

depgrouper sits between dependency resolution and update planning: it
reads the dependency groups declared for an update job, assigns every
resolved dependency to the groups whose rules it matches, and keeps the
rest aside so they can be updated one by one.

Features include:
    • Wildcard ``patterns`` / ``exclude-patterns`` group rules
    • Production / development dependency-type filters
    • Multi-membership: a dependency may belong to several groups
    • Automatic catch-all group for multi-directory security runs
    • Warnings for groups that match nothing
"""

from __future__ import annotations

from depgrouper.__version__ import __version__
from depgrouper.core import DependencyGroupEngine
from depgrouper.models import Dependency, DependencyGroup, Job, Source

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "depgrouper Contributors"
__license__ = "Apache-2.0"
__description__ = "Assign resolved dependencies to user-declared update groups."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    "Dependency",
    "DependencyGroup",
    "DependencyGroupEngine",
    "Job",
    "Source",
]
