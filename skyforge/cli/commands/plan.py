"""``skyforge plan`` and ``skyforge outputs`` — compose without provisioning.

Both commands run one composition pass from settings (environment, .env and
command-line overrides) and render the result. Nothing is sent to the cloud;
``pulumi up`` runs the same pass through the engine adapter.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from skyforge.config import SkyforgeSettings
from skyforge.core.orchestrator import build_infrastructure_graph
from skyforge.core.resource_graph import DeclarationError, ResourceGraph
from skyforge.core.submission_guard import SubmissionGuardError, enforce_submission_constraints
from skyforge.models.config import InfrastructureConfig
from skyforge.models.graph import GraphResult, SuffixToken

console = Console()


def _compose(overrides: dict[str, Any], suffix: str | None) -> GraphResult:
    settings = SkyforgeSettings(**{k: v for k, v in overrides.items() if v is not None})
    config = InfrastructureConfig.from_settings(settings)
    result = build_infrastructure_graph(
        config, suffix=SuffixToken(value=suffix) if suffix else None
    )
    enforce_submission_constraints(result, settings)
    return result


def _compose_or_exit(overrides: dict[str, Any], suffix: str | None) -> GraphResult:
    try:
        return _compose(overrides, suffix)
    except (DeclarationError, SubmissionGuardError, ValueError) as e:
        console.print(f"[bold red]Composition failed:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def plan_cmd(
    buildspec: Optional[Path] = typer.Option(
        None, "--buildspec", "-b", help="Path to the build specification file."
    ),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="Target region."),
    connection_arn: Optional[str] = typer.Option(
        None, "--connection-arn", help="ARN of the existing repository connection."
    ),
    repository: Optional[str] = typer.Option(
        None, "--repository", help="Source repository as owner/repo."
    ),
    branch: Optional[str] = typer.Option(None, "--branch", help="Branch to build."),
    site_index: Optional[Path] = typer.Option(
        None, "--site-index", help="Upload this file as the initial index document."
    ),
    schema: Optional[Path] = typer.Option(
        None, "--schema", help="GraphQL schema file for the API layer."
    ),
    auth: Optional[bool] = typer.Option(
        None, "--auth/--no-auth", help="Include the user directory and identity pool."
    ),
    api: Optional[bool] = typer.Option(
        None, "--api/--no-api", help="Include the GraphQL API and its key."
    ),
    suffix: Optional[str] = typer.Option(
        None, "--suffix", help="Reuse an existing suffix instead of generating one."
    ),
) -> None:
    """Compose the resource graph and list every declaration in creation order."""
    result = _compose_or_exit(
        {
            "buildspec_path": buildspec,
            "region": region,
            "connection_arn": connection_arn,
            "repository": repository,
            "branch": branch,
            "site_index_path": site_index,
            "graphql_schema_path": schema,
            "enable_auth": auth,
            "enable_api": api,
        },
        suffix,
    )

    graph = ResourceGraph(result.descriptors)
    table = Table(title=f"Resource graph ({len(graph)} resources)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Logical name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Depends on")
    for index, descriptor in enumerate(graph.ordered(), start=1):
        table.add_row(
            str(index),
            descriptor.logical_name,
            descriptor.resource_type,
            ", ".join(graph.get_references(descriptor.logical_name)) or "[dim]-[/dim]",
        )

    console.print()
    console.print(table)
    console.print(_outputs_panel(result))


def outputs_cmd(
    buildspec: Optional[Path] = typer.Option(
        None, "--buildspec", "-b", help="Path to the build specification file."
    ),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="Target region."),
    connection_arn: Optional[str] = typer.Option(
        None, "--connection-arn", help="ARN of the existing repository connection."
    ),
    repository: Optional[str] = typer.Option(
        None, "--repository", help="Source repository as owner/repo."
    ),
    auth: Optional[bool] = typer.Option(
        None, "--auth/--no-auth", help="Include the user directory and identity pool."
    ),
    api: Optional[bool] = typer.Option(
        None, "--api/--no-api", help="Include the GraphQL API and its key."
    ),
    suffix: Optional[str] = typer.Option(
        None, "--suffix", help="Reuse an existing suffix instead of generating one."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print outputs as JSON."),
) -> None:
    """Compose the resource graph and print only the published outputs."""
    result = _compose_or_exit(
        {
            "buildspec_path": buildspec,
            "region": region,
            "connection_arn": connection_arn,
            "repository": repository,
            "enable_auth": auth,
            "enable_api": api,
        },
        suffix,
    )

    if as_json:
        # Plain stdout for scripting
        typer.echo(json.dumps(result.outputs.describe(), indent=2, sort_keys=True))
        return
    console.print(_outputs_panel(result))


def _outputs_panel(result: GraphResult) -> Panel:
    lines = [
        f"[bold]{name}:[/bold] {value}" for name, value in result.outputs.describe().items()
    ]
    lines += [
        "",
        f"[dim]suffix={result.suffix.value}  fingerprint={result.fingerprint}[/dim]",
    ]
    return Panel(
        "\n".join(lines),
        title="[bold]Outputs[/bold]",
        border_style="green",
        padding=(1, 2),
    )
