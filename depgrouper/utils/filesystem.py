"""
Filesystem utilities for depgrouper.

Helpers for locating and reading requirements files inside the source
directories of an update job. All filesystem errors are normalized to
``FileOperationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from depgrouper.utils.logger import get_logger
from depgrouper.exceptions import FileOperationError
from depgrouper.constants import MAX_FILE_SIZE, REQUIREMENT_FILE_PATTERNS


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Ensure ``path`` is an existing regular file and resolve it."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.

    Raises:
        FileOperationError: Missing file, oversized file or read failure.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except Exception as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def resolve_job_directory(root: PathLike, directory: str) -> Path:
    """Resolve a job directory (``"/"``, ``"/backend"``) against ``root``.

    Job directories are always written relative to the repository root,
    with or without a leading slash.

    Raises:
        FileOperationError: The directory escapes ``root``.
    """
    base = Path(root).resolve()
    resolved = (base / directory.lstrip("/")).resolve()

    try:
        resolved.relative_to(base)
    except ValueError:
        raise FileOperationError(
            f"Directory outside repository root: {directory}",
            file_path=str(resolved),
            operation="validate",
        )

    return resolved


def find_requirements_files(
    directory: PathLike = ".",
    *,
    recursive: bool = False,
) -> List[Path]:
    """Find requirement files within a directory.

    Only the directory itself is searched unless ``recursive`` is set,
    since nested directories are usually separate job directories.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        logger.debug("Not a directory, no requirement files: %s", root)
        return []

    patterns = REQUIREMENT_FILE_PATTERNS["requirements"]
    matches: List[Path] = []

    for pattern in patterns:
        iterator = root.rglob(pattern) if recursive else root.glob(pattern)
        matches.extend(iterator)

    return sorted(set(matches))
