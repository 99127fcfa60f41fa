"""Main Typer application — imports and registers all CLI commands.

Entry point: ``skyforge`` (configured via pyproject.toml console scripts).

Commands: plan, outputs, lint-commit, version.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from skyforge import __version__
from skyforge.cli.commands.lint_commit import lint_commit_cmd
from skyforge.cli.commands.plan import outputs_cmd, plan_cmd
from skyforge.config import SkyforgeSettings

app = typer.Typer(
    name="skyforge",
    help="Skyforge: static website delivery infrastructure, composed and checked.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def configure_logging(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to SKYFORGE_LOG_LEVEL.",
    ),
) -> None:
    """Route library logging through Rich at the configured level."""
    level = log_level or SkyforgeSettings().log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


# Register subcommands
app.command(name="plan", help="Compose the resource graph and show what would be declared.")(plan_cmd)
app.command(name="outputs", help="Compose the resource graph and print its outputs.")(outputs_cmd)
app.command(name="lint-commit", help="Check a commit message against the commit policy.")(lint_commit_cmd)


@app.command(name="version", help="Show the installed version.")
def version_cmd() -> None:
    """Print the package version."""
    Console().print(f"skyforge {__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
