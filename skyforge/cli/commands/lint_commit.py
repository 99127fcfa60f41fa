"""``skyforge lint-commit`` — check a commit message against the commit policy.

Reads the message from the argument, a file (``--file .git/COMMIT_EDITMSG``
from a commit-msg hook) or standard input. Exits non-zero on any error;
warnings are printed but do not fail.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from skyforge.commitlint import lint_commit_message

console = Console()


def lint_commit_cmd(
    message: Optional[str] = typer.Argument(
        None, help="Commit message. Read from --file or stdin when omitted."
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Read the message from this file.", exists=True
    ),
) -> None:
    """Lint one commit message."""
    if message is None:
        message = file.read_text(encoding="utf-8") if file else sys.stdin.read()

    result = lint_commit_message(message)
    if result.ignored:
        console.print("[dim]Generated commit header, skipped.[/dim]")
        return

    for problem in result.errors:
        console.print(f"[red]✖[/red] {problem.message} [dim]\\[{problem.rule}][/dim]")
    for problem in result.warnings:
        console.print(f"[yellow]⚠[/yellow] {problem.message} [dim]\\[{problem.rule}][/dim]")

    if not result.valid:
        console.print(
            f"[bold red]{len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)[/bold red]"
        )
        raise typer.Exit(code=1)
    console.print("[green]Commit message OK.[/green]")
