"""Composition core: declare-functions, the resource graph and its guard."""

from skyforge.core.orchestrator import build_infrastructure_graph
from skyforge.core.resource_graph import ResourceGraph
from skyforge.core.submission_guard import enforce_submission_constraints

__all__ = ["build_infrastructure_graph", "ResourceGraph", "enforce_submission_constraints"]
