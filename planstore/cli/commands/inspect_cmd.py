"""``planstore inspect NAME`` — show which format holds an owner's plan.

Nothing is decoded: the command only fetches and classifies the records.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

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
from planstore.core.locator import LocatorRecordManager
from planstore.models.formats import ChunkedPlan, LocatorPlan
from planstore.models.records import SAVED_PLAN_ANNOTATION

console = Console()


def inspect_cmd(
    name: str = typer.Argument(..., help="Name of the owning object."),
    namespace: str = NAMESPACE_OPTION,
    workspace: str = WORKSPACE_OPTION,
    uid: str = UID_OPTION,
    suffix: str = SUFFIX_OPTION,
    db: Optional[Path] = DB_OPTION,
    mount_path: Optional[Path] = MOUNT_OPTION,
) -> None:
    """Show the stored format and records of a plan."""
    manager = build_manager(
        name,
        namespace=namespace,
        workspace=workspace,
        uid=uid,
        db_path=db,
        mount_path=mount_path,
    )
    try:
        stored = manager.describe_plan(suffix)
    except PlanNotFoundError as exc:
        console.print(f"[bold red]Plan not found:[/bold red] {exc}")
        raise typer.Exit(code=2)
    except PlanStorageError as exc:
        console.print(f"[bold red]Inspect failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    records = stored.records if isinstance(stored, ChunkedPlan) else [stored.record]

    table = Table(title=f"Plan {namespace}/{name} ([bold]{stored.kind}[/bold])")
    table.add_column("Record", style="cyan")
    table.add_column("Plan ID", style="green")
    table.add_column("Bytes", justify="right")
    for record in records:
        table.add_row(
            record.name,
            record.annotations.get(SAVED_PLAN_ANNOTATION, "-"),
            str(record.size_bytes),
        )
    console.print(table)

    if isinstance(stored, LocatorPlan):
        try:
            path = LocatorRecordManager.resolve_path(stored.record)
        except PlanStorageError as exc:
            console.print(f"[yellow]Malformed locator:[/yellow] {exc}")
            raise typer.Exit(code=1)
        console.print(f"Spill file: [cyan]{path}[/cyan]")
