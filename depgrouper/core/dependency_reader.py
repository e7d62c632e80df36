"""Dependency discovery for depgrouper.

Builds the flat dependency list handed to the grouping engine by reading
the requirements files found in each directory of an update job.

Parsing rules:

- Blank lines and ``#`` comments (full-line and inline) are ignored.
- Option lines such as ``-r``, ``-c``, ``-e`` or ``--hash`` are skipped;
  includes are not followed since every job directory is read anyway.
- Lines continued with a trailing backslash are joined.
- Requirements are parsed with :mod:`packaging` (PEP 508). An exact pin
  (``==`` or ``===``) becomes the dependency's version.
- Files whose name mentions ``dev`` or ``test`` declare development
  dependencies.
- A package declared in several files of one directory is reported once,
  production declarations taking precedence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple, Union

from packaging.requirements import InvalidRequirement, Requirement

from depgrouper.models import Dependency, Job
from depgrouper.exceptions import ParseError
from depgrouper.utils.logger import get_logger
from depgrouper.utils.filesystem import (
    find_requirements_files,
    resolve_job_directory,
    safe_read_file,
)
from depgrouper.constants import (
    COMMENT_PREFIX,
    DEVELOPMENT_FILE_MARKERS,
    OPTION_PREFIX,
)

logger = get_logger("core.dependency_reader")


def is_development_file(path: Path, directory: Path) -> bool:
    """Return True if ``path`` holds development-only requirements."""
    try:
        relative = path.relative_to(directory)
    except ValueError:
        relative = Path(path.name)

    lowered = relative.as_posix().lower()
    return any(marker in lowered for marker in DEVELOPMENT_FILE_MARKERS)


def _logical_lines(content: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, text)`` pairs of meaningful requirement lines."""
    buffer = ""
    start = 0

    for number, raw in enumerate(content.splitlines(), start=1):
        if not buffer:
            start = number
            # A comment ends at its own line, even with a trailing backslash
            if raw.lstrip().startswith(COMMENT_PREFIX):
                continue

        line = raw.rstrip()
        if line.endswith("\\"):
            buffer += line[:-1] + " "
            continue

        text = buffer + line
        buffer = ""

        if text.lstrip().startswith(COMMENT_PREFIX):
            continue
        text = text.split(" #", 1)[0].strip()
        if text:
            yield start, text

    if buffer.strip():
        yield start, buffer.strip()


def _pinned_version(requirement: Requirement) -> Optional[str]:
    for spec in requirement.specifier:
        if spec.operator in ("==", "===") and "*" not in spec.version:
            return spec.version
    return None


class DependencyReader:
    """Reads the dependencies of an update job from disk.

    Args:
        root: Repository root that job directories are relative to.
    """

    def __init__(self, root: Union[str, Path] = ".") -> None:
        self.root = Path(root)

    def read_job(self, job: Job) -> List[Dependency]:
        """Read the dependencies of every directory of ``job``, in order."""
        dependencies: List[Dependency] = []
        for directory in job.source.all_directories:
            dependencies.extend(self.read_directory(directory))

        logger.info(
            "Found %d dependency declaration(s) across %d job directories",
            len(dependencies),
            len(job.source.all_directories),
        )
        return dependencies

    def read_directory(self, directory: str) -> List[Dependency]:
        """Read every requirements file in one job directory.

        Args:
            directory: Job directory such as ``"/"`` or ``"/backend"``.

        Returns:
            Dependencies in file order, each package reported once.

        Raises:
            ParseError: A requirement line is not valid PEP 508.
            FileOperationError: The directory escapes the root or a file
                cannot be read.
        """
        path = resolve_job_directory(self.root, directory)
        files = sorted(
            find_requirements_files(path),
            key=lambda f: (is_development_file(f, path), f),
        )
        if not files:
            logger.debug("No requirements files in %s", directory)
            return []

        seen: Set[str] = set()
        dependencies: List[Dependency] = []

        for file in files:
            production = not is_development_file(file, path)
            parsed = self.parse_file(file, directory=directory, production=production)
            for dependency in parsed:
                if dependency.name in seen:
                    logger.debug(
                        "Skipping duplicate declaration of %s in %s",
                        dependency.name,
                        file,
                    )
                    continue
                seen.add(dependency.name)
                dependencies.append(dependency)

        return dependencies

    def parse_file(
        self,
        file: Path,
        *,
        directory: str = "/",
        production: bool = True,
    ) -> List[Dependency]:
        """Parse a single requirements file into dependencies."""
        logger.debug("Parsing %s", file)
        content = safe_read_file(file)
        dependencies: List[Dependency] = []

        for line_number, text in _logical_lines(content):
            if text.startswith(OPTION_PREFIX):
                continue
            # Per-requirement options such as --hash
            text = text.split(f" {OPTION_PREFIX}{OPTION_PREFIX}", 1)[0].strip()

            try:
                requirement = Requirement(text)
            except InvalidRequirement as exc:
                raise ParseError(
                    f"Invalid requirement: {exc}",
                    line_number=line_number,
                    line_content=text,
                    file_path=str(file),
                ) from exc

            dependencies.append(
                Dependency(
                    name=requirement.name,
                    version=_pinned_version(requirement),
                    directory=directory,
                    production=production,
                    source_file=file.name,
                )
            )

        return dependencies
