"""``planstore delete NAME`` — remove an owner's plan in every format."""

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

console = Console()


def delete_cmd(
    name: str = typer.Argument(..., help="Name of the owning object."),
    namespace: str = NAMESPACE_OPTION,
    workspace: str = WORKSPACE_OPTION,
    uid: str = UID_OPTION,
    suffix: str = SUFFIX_OPTION,
    db: Optional[Path] = DB_OPTION,
    mount_path: Optional[Path] = MOUNT_OPTION,
) -> None:
    """Delete chunk records, locator or legacy record, and any spill file."""
    manager = build_manager(
        name,
        namespace=namespace,
        workspace=workspace,
        uid=uid,
        db_path=db,
        mount_path=mount_path,
    )
    manager.delete_plan(suffix)
    console.print(f"[green]Deleted plan[/green] for {namespace}/{name}.")
