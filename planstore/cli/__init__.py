"""planstore CLI — Typer-based command-line interface.

Provides the ``planstore`` command with subcommands for writing, reading,
inspecting and deleting stored plans against a SQLite record store.

All output uses Rich for formatted terminal display.
"""
