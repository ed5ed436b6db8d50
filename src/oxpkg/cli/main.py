"""oxpkg CLI entrypoint.

Browse and edit OOXML packages (.docx/.pptx/.xlsx) from the command line.
Commands are registered from `oxpkg.cli.commands.*`.
"""

from __future__ import annotations

import logging
import os

import typer

app = typer.Typer(
    name="oxpkg",
    add_completion=False,
    no_args_is_help=True,
    help="Inspect and edit the parts of Office Open XML packages.",
)


@app.callback()
def _callback(
    log_level: str = typer.Option(
        os.environ.get("OXPKG_LOG_LEVEL", "WARNING"),
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Also read from OXPKG_LOG_LEVEL.",
    ),
) -> None:
    """oxpkg CLI."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"unknown log level {log_level!r}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command("version")
def version() -> None:
    """Print the installed oxpkg version."""
    from oxpkg import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `oxpkg --help` is fast.
    """
    from oxpkg.cli.commands import cat as cat_cmd
    from oxpkg.cli.commands import edit as edit_cmd
    from oxpkg.cli.commands import inspect_pkg as inspect_cmd
    from oxpkg.cli.commands import ls as ls_cmd
    from oxpkg.cli.commands import rels as rels_cmd
    from oxpkg.cli.commands import unpack as unpack_cmd

    ls_cmd.register(app)
    cat_cmd.register(app)
    rels_cmd.register(app)
    inspect_cmd.register(app)
    edit_cmd.register(app)
    unpack_cmd.register(app)


_register_commands()
