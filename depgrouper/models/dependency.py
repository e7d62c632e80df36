"""
Dependency data model for depgrouper.

A :class:`Dependency` is the unit moved between dependency groups. It is
immutable: grouping only ever changes which collections reference it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from packaging.utils import canonicalize_name


def normalize_name(name: str) -> str:
    """Normalize a package name according to PEP 503.

    Runs of ``-``, ``_`` and ``.`` collapse to a single ``-``.
    """
    return str(canonicalize_name(name))


@dataclass(frozen=True)
class Dependency:
    """A resolved dependency considered for an update.

    Args:
        name: Package name, normalized on construction.
        version: Currently pinned version, if known.
        directory: Job directory the dependency was found in.
        production: ``False`` for development-only dependencies.
        source_file: Requirements file that declared the dependency.
    """

    name: str
    version: Optional[str] = None
    directory: str = "/"
    production: bool = True
    source_file: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_name(self.name))

    @property
    def display_name(self) -> str:
        return f"{self.name}=={self.version}" if self.version else self.name

    def to_json(self) -> Dict[str, Union[str, bool, None]]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "version": self.version,
            "directory": self.directory,
            "production": self.production,
            "source_file": self.source_file,
        }

    def __str__(self) -> str:
        return self.display_name
