"""Main Typer application — imports and registers all CLI commands.

Entry point: ``planstore`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

from typing import Optional

import typer

from planstore.cli.commands.delete import delete_cmd
from planstore.cli.commands.inspect_cmd import inspect_cmd
from planstore.cli.commands.read import read_cmd
from planstore.cli.commands.write import write_cmd
from planstore.config import configure_logging, settings

app = typer.Typer(
    name="planstore",
    help="planstore: hybrid size-limited / spill storage for Terraform plans.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default from PLANSTORE_LOG_LEVEL)."
    ),
) -> None:
    configure_logging(log_level or settings.log_level)


# Register subcommands
app.command(name="write", help="Store a plan file.")(write_cmd)
app.command(name="read", help="Read a stored plan.")(read_cmd)
app.command(name="inspect", help="Show the stored format of a plan.")(inspect_cmd)
app.command(name="delete", help="Delete a stored plan.")(delete_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
