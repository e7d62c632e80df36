"""
Executable module for depgrouper.

Running:
    python -m depgrouper

is equivalent to:
    depgrouper
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write("depgrouper CLI could not be started.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from depgrouper.__version__ import __version__

        sys.stderr.write(f"depgrouper version: {__version__}\n")
    except ImportError:
        sys.stderr.write("depgrouper version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """Main entrypoint when executing ``python -m depgrouper``.

    Returns:
        Exit code returned by the CLI, or 1 if it cannot be imported.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from depgrouper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
