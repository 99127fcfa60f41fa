"""Submission guard — validates a composed graph before the engine sees it.

The guard re-checks every invariant of a ``GraphResult`` in one place and
fails hard (raises ``SubmissionGuardError``) listing all violations at
once. It runs at the end of every composition pass and again in the engine
adapter, so a result built or altered outside the orchestrator is still
caught before submission.
"""

from __future__ import annotations

import logging

from skyforge.config import SkyforgeSettings
from skyforge.core.pipeline import (
    ArtifactChainError,
    StageOrderError,
    validate_artifact_chain,
    validate_stage_order,
)
from skyforge.core.policies import scope_violations
from skyforge.core.resource_graph import (
    CyclicDependencyError,
    DeclarationError,
    ResourceGraph,
)
from skyforge.models.build import BuildJob
from skyforge.models.graph import GraphResult
from skyforge.models.keys import EncryptionKey, KeyAlias
from skyforge.models.pipeline import Pipeline
from skyforge.models.policies import IamRole, IamRolePolicy
from skyforge.models.storage import StorageContainer

logger = logging.getLogger(__name__)


class SubmissionGuardError(RuntimeError):
    """Raised when a graph must not be handed to the provisioning engine.

    It must not be caught and ignored: the pass has failed and no output
    set is published.
    """


def graph_violations(result: GraphResult) -> list[str]:
    """Return every invariant violation in *result*; empty means submittable."""
    violations: list[str] = []

    # 1. References resolve, names are unique, no cycles
    try:
        ResourceGraph(result.descriptors)
    except (DeclarationError, CyclicDependencyError) as exc:
        violations.append(str(exc))

    # 2. Stage order and artifact chain of every pipeline
    for pipeline in result.of_type(Pipeline):
        try:
            validate_stage_order(pipeline.stages)
            validate_artifact_chain(pipeline.stages)
        except (StageOrderError, ArtifactChainError) as exc:
            violations.append(f"{pipeline.logical_name}: {exc}")

    # 3. Resource scope of every role policy
    for policy in result.of_type(IamRolePolicy):
        violations.extend(scope_violations(policy.trust))

    # 4. Each role's inline policy belongs to the same principal
    roles = {role.logical_name: role for role in result.of_type(IamRole)}
    for policy in result.of_type(IamRolePolicy):
        role = roles.get(policy.role)
        if role is not None and role.trust.principal != policy.trust.principal:
            violations.append(
                f"{policy.logical_name} grants {policy.trust.principal} permissions "
                f"on a role assumed by {role.trust.principal}"
            )

    # 5. Aliases target a declared key
    keys = {k.logical_name for k in result.of_type(EncryptionKey)}
    for alias in result.of_type(KeyAlias):
        if alias.target_key not in keys:
            violations.append(
                f"{alias.alias_name} targets {alias.target_key!r}, which is not a declared key"
            )

    # 6. Build variable names are unique
    for job in result.of_type(BuildJob):
        names = job.variable_names
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            violations.append(
                f"{job.logical_name} declares duplicate variables: {', '.join(duplicates)}"
            )

    return violations


def production_violations(result: GraphResult, settings: SkyforgeSettings) -> list[str]:
    """Constraints that apply only when ``settings.is_production``."""
    if not settings.is_production:
        return []

    violations: list[str] = []
    if settings.debug:
        violations.append(
            "debug=True is not allowed in production. Set SKYFORGE_DEBUG=false."
        )
    for bucket in result.of_type(StorageContainer):
        if bucket.force_destroy:
            violations.append(
                f"{bucket.bucket_name} has force_destroy enabled in production. "
                "Set SKYFORGE_FORCE_DESTROY=false."
            )
    return violations


def enforce_submission_constraints(
    result: GraphResult, settings: SkyforgeSettings | None = None
) -> None:
    """Raise ``SubmissionGuardError`` if *result* must not be submitted.

    Parameters
    ----------
    result:
        The composed graph.
    settings:
        Active settings; production-only constraints are checked when given.

    Raises
    ------
    SubmissionGuardError
        If any constraint is violated.
    """
    violations = graph_violations(result)
    if settings is not None:
        violations.extend(production_violations(result, settings))

    if violations:
        msg = "Submission guard failed.\n" + "\n".join(f"  - {v}" for v in violations)
        logger.critical(msg)
        raise SubmissionGuardError(msg)

    logger.info("Submission guard passed for %d resources.", len(result.descriptors))
