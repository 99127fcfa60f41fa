"""Trust policy / role managers for the two service principals.

Each principal gets a role whose inline policy names exactly the actions
that principal performs, scoped to the specific ARNs it touches:

- the pipeline (``codepipeline.amazonaws.com``) moves artifacts through
  the bucket, uses the source connection and starts the build job;
- the build (``codebuild.amazonaws.com``) reads and writes artifacts and
  writes its logs.

A wildcard resource is only legal for actions whose target does not exist
at composition time (log groups and streams are created by the build).
"""

from __future__ import annotations

import logging

from skyforge.models.build import BuildJob
from skyforge.models.keys import EncryptionKey
from skyforge.models.policies import (
    WILDCARD,
    IamRole,
    IamRolePolicy,
    PolicyStatement,
    TrustPolicy,
)
from skyforge.models.references import Ref
from skyforge.models.storage import StorageContainer

logger = logging.getLogger(__name__)

PIPELINE_PRINCIPAL = "codepipeline.amazonaws.com"
BUILD_PRINCIPAL = "codebuild.amazonaws.com"

# Actions allowed to carry a "*" resource scope.
WILDCARD_SCOPED_ACTIONS: frozenset[str] = frozenset({
    "logs:CreateLogGroup",
    "logs:CreateLogStream",
    "logs:PutLogEvents",
})


class PolicyScopeError(ValueError):
    """Raised when a statement's resource scope is too broad or unresolvable."""


def declare_pipeline_trust_policy(
    bucket: StorageContainer,
    key: EncryptionKey,
    connection_arn: str,
    build_job: BuildJob,
) -> TrustPolicy:
    trust = TrustPolicy(
        principal=PIPELINE_PRINCIPAL,
        statements=(
            PolicyStatement(
                sid="ArtifactStore",
                actions=(
                    "s3:GetBucketVersioning",
                    "s3:GetObject",
                    "s3:GetObjectVersion",
                    "s3:PutObject",
                    "s3:PutObjectAcl",
                ),
                resources=(bucket.arn, bucket.objects_arn),
            ),
            PolicyStatement(
                sid="ArtifactEncryption",
                actions=(
                    "kms:Decrypt",
                    "kms:DescribeKey",
                    "kms:Encrypt",
                    "kms:GenerateDataKey*",
                    "kms:ReEncrypt*",
                ),
                resources=(key.arn,),
            ),
            PolicyStatement(
                sid="SourceConnection",
                actions=("codestar-connections:UseConnection",),
                resources=(connection_arn,),
            ),
            PolicyStatement(
                sid="BuildInvocation",
                actions=("codebuild:BatchGetBuilds", "codebuild:StartBuild"),
                resources=(build_job.arn,),
            ),
        ),
    )
    check_resource_scope(trust)
    return trust


def declare_build_trust_policy(
    bucket: StorageContainer, key: EncryptionKey
) -> TrustPolicy:
    trust = TrustPolicy(
        principal=BUILD_PRINCIPAL,
        statements=(
            PolicyStatement(
                sid="BuildLogs",
                actions=(
                    "logs:CreateLogGroup",
                    "logs:CreateLogStream",
                    "logs:PutLogEvents",
                ),
                resources=(WILDCARD,),
            ),
            PolicyStatement(
                sid="ArtifactObjects",
                actions=("s3:GetObject", "s3:GetObjectVersion", "s3:PutObject"),
                resources=(bucket.objects_arn,),
            ),
            PolicyStatement(
                sid="ArtifactEncryption",
                actions=("kms:Decrypt", "kms:Encrypt", "kms:GenerateDataKey*"),
                resources=(key.arn,),
            ),
        ),
    )
    check_resource_scope(trust)
    return trust


def declare_service_role(
    name: str, project_name: str, trust: TrustPolicy
) -> tuple[IamRole, IamRolePolicy]:
    """Declare the role for *trust*'s principal and its inline policy."""
    role = IamRole(
        logical_name=f"{name}-role",
        role_name=f"{project_name}-{name}-role",
        trust=trust,
    )
    policy = IamRolePolicy(
        logical_name=f"{name}-role-policy",
        policy_name=f"{project_name}-{name}-policy",
        role=role.logical_name,
        trust=trust,
    )
    logger.debug(
        "Declared role %s for %s with %d actions",
        role.role_name,
        trust.principal,
        len(trust.actions),
    )
    return role, policy


def _is_arn(resource: str) -> bool:
    return resource.startswith("arn:") and resource.count(":") >= 5


def is_wildcard_resource(resource: str) -> bool:
    """Whether *resource* matches more than the specific resources it could name.

    ``*`` itself, and any ARN with ``*`` in its partition, service, region,
    account or resource segment. The one exception is an S3 object scope
    ``arn:aws:s3:::<bucket>/*``, which names every object of one bucket.
    """
    if resource == WILDCARD:
        return True
    parts = resource.split(":", 5)
    if len(parts) != 6:
        return False
    _, partition, service, region, account, name = parts
    if WILDCARD in (partition, service, region, account):
        return True
    if service == "s3" and name.endswith("/*"):
        name = name[:-2]
    return not name or WILDCARD in name


def scope_violations(trust: TrustPolicy) -> list[str]:
    """Return a message for every out-of-scope resource in *trust*."""
    violations: list[str] = []
    for statement in trust.statements:
        for resource in statement.resources:
            if isinstance(resource, Ref):
                continue
            if resource != WILDCARD and not _is_arn(resource):
                violations.append(
                    f"{trust.principal} statement {statement.sid!r} references "
                    f"unresolvable resource {resource!r}"
                )
            elif is_wildcard_resource(resource):
                broad = sorted(set(statement.actions) - WILDCARD_SCOPED_ACTIONS)
                if broad:
                    violations.append(
                        f"{trust.principal} statement {statement.sid!r} grants "
                        f"{', '.join(broad)} on {resource!r} although a specific ARN exists"
                    )
    return violations


def check_resource_scope(trust: TrustPolicy) -> None:
    """Raise ``PolicyScopeError`` if *trust* has any scope violation."""
    violations = scope_violations(trust)
    if violations:
        raise PolicyScopeError("; ".join(violations))
