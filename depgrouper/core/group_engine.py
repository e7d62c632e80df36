"""Dependency group engine for depgrouper.

Keeps track of the dependency groups a user declared for an update job and
assigns the job's dependencies to them.

The engine is built from the job configuration once dependencies have been
parsed, and is then fed the full dependency list exactly once:

1. :meth:`DependencyGroupEngine.from_job_config` instantiates one
   :class:`DependencyGroup` per declared group, synthesizing a catch-all
   group for security-only runs that span several directories.
2. :meth:`DependencyGroupEngine.assign_to_groups` appends each dependency
   to every group it matches. Dependencies may belong to more than one
   group; those matching none are kept as *ungrouped* so they can be
   updated individually.
3. Groups left empty after assignment are reported in one warning.

Typical usage::

    engine = DependencyGroupEngine.from_job_config(job)
    engine.assign_to_groups(dependencies)

    for group in engine.dependency_groups:
        plan_group_update(group)
    for dependency in engine.ungrouped_dependencies:
        plan_single_update(dependency)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from depgrouper.models import Dependency, DependencyGroup, Job
from depgrouper.utils.logger import get_logger
from depgrouper.exceptions import GroupConfigurationError
from depgrouper.constants import (
    MATCH_ALL_PATTERN,
    RULE_PATTERNS,
    SYNTHETIC_GROUP_NAME_TEMPLATE,
)

logger = get_logger("core.group_engine")


class EngineState(Enum):
    """Lifecycle of a :class:`DependencyGroupEngine`."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"


def synthetic_group_for(job: Job) -> Optional[Dict[str, Any]]:
    """Return the catch-all group descriptor a job needs, if any.

    A security-only job spanning several directories with no declared
    groups is still treated as a grouped update: everything goes into a
    single ``"<package manager> group"``.

    Args:
        job: The update job.

    Returns:
        A ``{"name": ..., "rules": ...}`` descriptor, or ``None``.
    """
    directories = job.source.directories or []
    if not job.security_updates_only or len(directories) < 2 or job.dependency_groups:
        return None

    return {
        "name": SYNTHETIC_GROUP_NAME_TEMPLATE.format(
            package_manager=job.package_manager
        ),
        "rules": {RULE_PATTERNS: [MATCH_ALL_PATTERN]},
    }


class DependencyGroupEngine:
    """Assigns an update job's dependencies to its dependency groups.

    Args:
        dependency_groups: Groups in declaration order.

    Attributes:
        dependency_groups: Groups in declaration order; fixed for the
            engine's lifetime.
        ungrouped_dependencies: Dependencies that matched no group.
        state: :attr:`EngineState.CONFIGURED` once dependencies have
            been assigned.
    """

    __slots__ = ("dependency_groups", "ungrouped_dependencies", "state")

    def __init__(self, dependency_groups: Iterable[DependencyGroup]) -> None:
        self.dependency_groups: List[DependencyGroup] = list(dependency_groups)
        self.ungrouped_dependencies: List[Dependency] = []
        self.state: EngineState = EngineState.UNCONFIGURED

    @classmethod
    def from_job_config(cls, job: Job) -> "DependencyGroupEngine":
        """Build an engine from the groups declared on ``job``.

        When :func:`synthetic_group_for` yields a group it is appended to
        ``job.dependency_groups``. If the job refreshes an existing pull
        request, the refresh is also redirected to the synthesized group so
        pull requests opened before grouping was the default still match.

        Args:
            job: The update job.

        Returns:
            An unconfigured engine.
        """
        synthetic = synthetic_group_for(job)
        if synthetic is not None:
            logger.debug(
                "Security update across %d directories, grouping all "
                "dependencies into %r",
                len(job.source.directories or []),
                synthetic["name"],
            )
            job.dependency_groups.append(synthetic)

            if job.updating_a_pull_request:
                job.override_group_to_refresh_due_to_old_defaults(
                    job.dependency_groups[0]["name"]
                )

        groups = [
            DependencyGroup(name=group["name"], rules=group.get("rules"))
            for group in job.dependency_groups
        ]
        logger.debug("Configured %d dependency group(s)", len(groups))

        return cls(dependency_groups=groups)

    @property
    def groups_calculated(self) -> bool:
        """True once :meth:`assign_to_groups` has completed."""
        return self.state is EngineState.CONFIGURED

    def find_group(self, name: str) -> Optional[DependencyGroup]:
        """Return the first group called ``name``, or ``None``."""
        return next(
            (group for group in self.dependency_groups if group.name == name),
            None,
        )

    def assign_to_groups(self, dependencies: Iterable[Dependency]) -> None:
        """Distribute ``dependencies`` across the engine's groups.

        Each dependency is appended to every group whose rules it matches,
        in group declaration order. Dependencies matching no group are
        collected in :attr:`ungrouped_dependencies`; without any groups,
        all dependencies end up there.

        Args:
            dependencies: Dependencies of the job, in processing order.

        Raises:
            GroupConfigurationError: Dependencies were already assigned.
                Nothing is modified in that case.
        """
        if self.state is EngineState.CONFIGURED:
            raise GroupConfigurationError(
                "dependency groups have already been configured!",
                group_count=len(self.dependency_groups),
            )

        if self.dependency_groups:
            for dependency in dependencies:
                matched = False
                for group in self.dependency_groups:
                    if group.contains(dependency):
                        group.dependencies.append(dependency)
                        matched = True

                if not matched:
                    self.ungrouped_dependencies.append(dependency)
        else:
            self.ungrouped_dependencies = list(dependencies)

        logger.info(
            "Assigned dependencies to %d group(s), %d ungrouped",
            len(self.dependency_groups),
            len(self.ungrouped_dependencies),
        )

        self._validate_groups()
        self.state = EngineState.CONFIGURED

    def _validate_groups(self) -> None:
        empty_groups = [g for g in self.dependency_groups if not g.dependencies]
        if empty_groups:
            self._warn_misconfigured_groups(empty_groups)

    @staticmethod
    def _warn_misconfigured_groups(groups: List[DependencyGroup]) -> None:
        names = "\n".join(f"- {group.name}" for group in groups)
        logger.warning(
            "Please check your configuration as there are groups where no "
            "dependencies match:\n%s\n\n"
            "This can happen if:\n"
            "- the group's 'pattern' rules are misspelled\n"
            "- your configuration's 'allow' rules do not permit any of the "
            "dependencies that match the group\n"
            "- the dependencies that match the group rules have been removed "
            "from your project",
            names,
        )

    def __repr__(self) -> str:
        return (
            "DependencyGroupEngine("
            f"groups={[g.name for g in self.dependency_groups]!r}, "
            f"ungrouped={len(self.ungrouped_dependencies)!r}, "
            f"state={self.state.value!r}"
            ")"
        )
