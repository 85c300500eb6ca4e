"""``planstore read NAME`` — fetch an owner's current plan."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from planstore.cli.commands._manager import (
    DB_OPTION,
    MOUNT_OPTION,
    NAMESPACE_OPTION,
    SUFFIX_OPTION,
    UID_OPTION,
    WORKSPACE_OPTION,
    build_manager,
)
from planstore.core.errors import PlanNotFoundError, PlanStorageError

console = Console(stderr=True)


def read_cmd(
    name: str = typer.Argument(..., help="Name of the owning object."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the plan here instead of stdout."
    ),
    namespace: str = NAMESPACE_OPTION,
    workspace: str = WORKSPACE_OPTION,
    uid: str = UID_OPTION,
    suffix: str = SUFFIX_OPTION,
    db: Optional[Path] = DB_OPTION,
    mount_path: Optional[Path] = MOUNT_OPTION,
) -> None:
    """Read a plan back, whichever format it was stored in."""
    manager = build_manager(
        name,
        namespace=namespace,
        workspace=workspace,
        uid=uid,
        db_path=db,
        mount_path=mount_path,
    )
    try:
        data = manager.read_plan(suffix)
    except PlanNotFoundError as exc:
        console.print(f"[bold red]Plan not found:[/bold red] {exc}")
        raise typer.Exit(code=2)
    except PlanStorageError as exc:
        console.print(f"[bold red]Read failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if output is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return

    output.write_bytes(data)
    console.print(f"[green]Wrote[/green] {len(data)} bytes to {output}")
