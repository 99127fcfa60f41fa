"""Skyforge: static website delivery infrastructure as a checked resource graph.

One composition pass declares an encrypted artifact store, a public website
bucket, least-privilege service roles, a build job and a three-stage
delivery pipeline, with an optional user directory and GraphQL API. The
graph is validated before a provisioning engine (Pulumi) ever sees it.
"""

__version__ = "0.1.0"
__description__ = "Composable, validated infrastructure for static website delivery"

from skyforge.core.orchestrator import build_infrastructure_graph
from skyforge.models.config import InfrastructureConfig
from skyforge.cli.app import app as cli

__all__ = ["build_infrastructure_graph", "InfrastructureConfig", "cli", "__version__"]
