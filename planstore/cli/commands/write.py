"""``planstore write NAME PLAN_FILE`` — store a plan file for an owner."""

from __future__ import annotations

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
from planstore.core.errors import PlanStorageError

console = Console()


def write_cmd(
    name: str = typer.Argument(..., help="Name of the owning object."),
    plan_file: Path = typer.Argument(..., help="Plan file to store.", exists=True, dir_okay=False),
    plan_id: str = typer.Option(..., "--plan-id", "-p", help="Correlation id of this plan."),
    namespace: str = NAMESPACE_OPTION,
    workspace: str = WORKSPACE_OPTION,
    uid: str = UID_OPTION,
    suffix: str = SUFFIX_OPTION,
    storage_type: Optional[str] = typer.Option(
        None,
        "--storage-type",
        "-t",
        help="Storage type: size-limited, spill or auto.",
    ),
    max_size: Optional[int] = typer.Option(
        None, "--max-size", help="Largest plan kept in the size-limited store (bytes)."
    ),
    auto_fallback: bool = typer.Option(
        False, "--auto-fallback", help="Spill plans larger than --max-size."
    ),
    db: Optional[Path] = DB_OPTION,
    mount_path: Optional[Path] = MOUNT_OPTION,
) -> None:
    """Store a plan, choosing the size-limited or spill store by size."""
    manager = build_manager(
        name,
        namespace=namespace,
        workspace=workspace,
        uid=uid,
        db_path=db,
        mount_path=mount_path,
        storage_type=storage_type,
        max_size=max_size,
        auto_fallback=auto_fallback,
    )
    data = plan_file.read_bytes()
    try:
        method = manager.write_plan(plan_id, data, suffix)
    except PlanStorageError as exc:
        console.print(f"[bold red]Write failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(
        f"[green]Stored plan[/green] [cyan]{plan_id}[/cyan] for "
        f"{namespace}/{name} ({len(data)} bytes) in the [bold]{method.value}[/bold] store."
    )
