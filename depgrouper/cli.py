"""
Command-line interface for depgrouper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from depgrouper.config import load_config
from depgrouper.__version__ import __version__
from depgrouper.context import DepGrouperContext
from depgrouper.exceptions import ConfigError, DepGrouperError
from depgrouper.commands.assign import assign
from depgrouper.utils.console import print_error, print_warning, reconfigure_console
from depgrouper.utils.logger import get_logger, setup_logging, verbosity_to_level

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the job configuration file.",
    envvar="DEPGROUPER_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="DEPGROUPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="depgrouper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """depgrouper — assign dependencies to update groups.

    \b
    Available commands:
      depgrouper assign            Show which group each dependency joins

    \b
    Examples:
      depgrouper assign
      depgrouper -c jobs/security.toml assign --format json
      depgrouper -v assign --group web
    """
    level = verbosity_to_level(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    grouper_ctx = DepGrouperContext()
    grouper_ctx.config_path = config or loaded_config.source_path
    grouper_ctx.color = color
    grouper_ctx.verbose = verbose
    grouper_ctx.config = loaded_config
    ctx.obj = grouper_ctx

    logger.debug("depgrouper v%s", __version__)
    logger.debug("Config path: %s", grouper_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


cli.add_command(assign)


def main() -> int:
    """Main entry point for the depgrouper CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except DepGrouperError as exc:
        print_error(str(exc))
        logger.debug(
            "DepGrouperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
