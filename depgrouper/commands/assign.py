"""Assign command implementation for depgrouper.

Reads the dependencies of an update job and shows which dependency group
each of them lands in.

The command chains three components:

1. **DepGrouperConfig** — the job description loaded by the CLI group.
2. **DependencyReader** — collects dependencies from the requirements
   files of every job directory.
3. **DependencyGroupEngine** — builds the groups (synthesizing one for
   multi-directory security runs) and assigns the dependencies.

Typical usage::

    # Show every group and the ungrouped dependencies
    $ depgrouper assign

    # Machine-readable output for a monorepo checkout
    $ depgrouper assign path/to/repo --format json

    # Only the members of one group
    $ depgrouper assign --group web
"""

from __future__ import annotations

import sys
import json
from pathlib import Path
from typing import List, Optional

import click

from depgrouper.config import DepGrouperConfig
from depgrouper.exceptions import DepGrouperError
from depgrouper.context import pass_context, DepGrouperContext
from depgrouper.core import DependencyGroupEngine, DependencyReader
from depgrouper.models import Dependency, DependencyGroup, Job
from depgrouper.utils import (
    get_logger,
    print_error,
    print_success,
    print_group_table,
    print_warning,
)

logger = get_logger("commands.assign")


@click.command()
@click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--group",
    "-g",
    "group_name",
    help="Show only the named dependency group.",
)
@click.option(
    "--security-updates-only",
    is_flag=True,
    help="Treat the job as a security-only update.",
)
@pass_context
def assign(
    ctx: DepGrouperContext,
    root: Path,
    format: str,
    group_name: Optional[str],
    security_updates_only: bool,
) -> None:
    """Assign the dependencies under ROOT to their dependency groups.

    Dependencies matching several groups are listed under each of them.
    Dependencies matching none are listed as ungrouped. Groups that match
    nothing are reported as a warning.
    """
    try:
        config = ctx.config or DepGrouperConfig()
        job = config.to_job()
        if security_updates_only:
            job.security_updates_only = True

        engine = _assign(job, root)

        if group_name is not None:
            group = engine.find_group(group_name)
            if group is None:
                raise DepGrouperError(
                    f"Unknown dependency group: {group_name}",
                    {"available": ", ".join(g.name for g in engine.dependency_groups)},
                )
            groups = [group]
            ungrouped: List[Dependency] = []
        else:
            groups = engine.dependency_groups
            ungrouped = engine.ungrouped_dependencies

        if format == "json":
            _display_json(job, groups, ungrouped)
        else:
            _display_table(groups, ungrouped)

    except DepGrouperError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in assign command")
        sys.exit(1)


def _assign(job: Job, root: Path) -> DependencyGroupEngine:
    """Build the engine for ``job`` and feed it the dependencies under ``root``."""
    engine = DependencyGroupEngine.from_job_config(job)
    dependencies = DependencyReader(root).read_job(job)

    logger.info(
        "Assigning %d dependencies to %d group(s)",
        len(dependencies),
        len(engine.dependency_groups),
    )
    engine.assign_to_groups(dependencies)
    return engine


def _display_table(
    groups: List[DependencyGroup],
    ungrouped: List[Dependency],
) -> None:
    """Render one row per group, plus one for ungrouped dependencies."""
    if not groups and not ungrouped:
        print_warning("No dependencies found")
        return

    print_group_table(
        [
            (group.name, [d.display_name for d in group.dependencies])
            for group in groups
        ],
        ungrouped=[d.display_name for d in ungrouped],
    )

    grouped = sum(1 for group in groups if group.dependencies)
    print_success(f"{grouped} of {len(groups)} group(s) matched dependencies")


def _display_json(
    job: Job,
    groups: List[DependencyGroup],
    ungrouped: List[Dependency],
) -> None:
    """Render the assignment as JSON for machine consumption.

    Example::

        {
          "groups": [{"name": "web", "rules": {...}, "dependencies": [...]}],
          "ungrouped": ["requests"],
          "dependency_group_to_refresh": null
        }
    """
    data = {
        "groups": [group.to_dict() for group in groups],
        "ungrouped": [dependency.name for dependency in ungrouped],
        "dependency_group_to_refresh": job.dependency_group_to_refresh,
    }
    print(json.dumps(data, indent=2))
