"""Plan smoke test: composes the full graph with every layer enabled.

Usage:
    python demo_plan.py
"""

from __future__ import annotations

from pathlib import Path

from skyforge.core.orchestrator import build_infrastructure_graph
from skyforge.core.resource_graph import ResourceGraph
from skyforge.models.config import InfrastructureConfig


def main() -> None:
    """Compose a sample graph and print it in creation order."""
    config = InfrastructureConfig(
        connection_arn=(
            "arn:aws:codestar-connections:us-east-1:123456789012:connection/demo"
        ),
        repository="acme/website",
        buildspec=Path("buildspec.yml").read_text(encoding="utf-8"),
        enable_auth=True,
        enable_api=True,
        graphql_schema="type Query { hello: String }",
    )
    result = build_infrastructure_graph(config)
    print(f"Suffix: {result.suffix.value} | Fingerprint: {result.fingerprint}")
    print()

    graph = ResourceGraph(result.descriptors)
    for descriptor in graph.ordered():
        deps = ", ".join(graph.get_references(descriptor.logical_name)) or "-"
        print(f"  {descriptor.logical_name:<28} {descriptor.resource_type:<40} <- {deps}")

    print()
    for name, value in result.outputs.describe().items():
        print(f"{name}: {value}")


if __name__ == "__main__":
    main()
