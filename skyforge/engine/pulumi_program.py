"""Pulumi program — declares a composed graph with the AWS provider.

Descriptors are declared in topological order. Each ``Ref`` becomes the
matching output of an already-declared resource, ``JsonDocument``s become
``Output.json_dumps`` and ``FileSource``s become file assets. Resolution,
diffing and the remote calls all happen inside Pulumi.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pulumi
import pulumi_aws as aws

from skyforge.config import SkyforgeSettings
from skyforge.core.orchestrator import build_infrastructure_graph
from skyforge.core.resource_graph import ResourceGraph, UnresolvedReferenceError
from skyforge.core.submission_guard import enforce_submission_constraints
from skyforge.models.auth import (
    ApiKey,
    GraphqlApi,
    IdentityPool,
    UserPool,
    UserPoolClient,
)
from skyforge.models.build import BuildJob
from skyforge.models.config import InfrastructureConfig
from skyforge.models.graph import GraphOutputs, GraphResult, SuffixToken
from skyforge.models.keys import EncryptionKey, KeyAlias
from skyforge.models.pipeline import Pipeline
from skyforge.models.policies import IamRole, IamRolePolicy
from skyforge.models.references import FileSource, JsonDocument, Ref
from skyforge.models.storage import (
    BucketObject,
    BucketOwnershipControls,
    BucketPublicAccessBlock,
    BucketWebsite,
    StorageContainer,
)

logger = logging.getLogger(__name__)

RESOURCE_CLASSES: dict[str, type[pulumi.CustomResource]] = {
    EncryptionKey.resource_type: aws.kms.Key,
    KeyAlias.resource_type: aws.kms.Alias,
    StorageContainer.resource_type: aws.s3.BucketV2,
    BucketWebsite.resource_type: aws.s3.BucketWebsiteConfigurationV2,
    BucketOwnershipControls.resource_type: aws.s3.BucketOwnershipControls,
    BucketPublicAccessBlock.resource_type: aws.s3.BucketPublicAccessBlock,
    BucketObject.resource_type: aws.s3.BucketObject,
    IamRole.resource_type: aws.iam.Role,
    IamRolePolicy.resource_type: aws.iam.RolePolicy,
    BuildJob.resource_type: aws.codebuild.Project,
    Pipeline.resource_type: aws.codepipeline.Pipeline,
    UserPool.resource_type: aws.cognito.UserPool,
    UserPoolClient.resource_type: aws.cognito.UserPoolClient,
    IdentityPool.resource_type: aws.cognito.IdentityPool,
    GraphqlApi.resource_type: aws.appsync.GraphQLApi,
    ApiKey.resource_type: aws.appsync.ApiKey,
}


def resolve_ref(ref: Ref, resources: dict[str, pulumi.Resource]) -> pulumi.Output:
    try:
        resource = resources[ref.target]
    except KeyError:
        raise UnresolvedReferenceError(
            f"{ref} points at {ref.target!r}, which has not been declared yet"
        ) from None
    output = getattr(resource, ref.attribute)
    if ref.key is not None:
        key = ref.key
        output = output.apply(lambda mapping: mapping[key])
    return output


def resolve_inputs(value: Any, resources: dict[str, pulumi.Resource]) -> Any:
    """Replace every deferred value inside *value* with its engine counterpart."""
    if isinstance(value, Ref):
        return resolve_ref(value, resources)
    if isinstance(value, JsonDocument):
        return pulumi.Output.json_dumps(resolve_inputs(value.body, resources))
    if isinstance(value, FileSource):
        return pulumi.FileAsset(str(value.path))
    if isinstance(value, dict):
        return {k: resolve_inputs(v, resources) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [resolve_inputs(v, resources) for v in value]
    return value


def declare_resources(
    result: GraphResult, settings: SkyforgeSettings | None = None
) -> dict[str, pulumi.Resource]:
    """Declare every descriptor of *result* with Pulumi, dependencies first.

    The submission guard runs first; nothing is declared if it fails.
    Returns the Pulumi resources keyed by logical name.
    """
    enforce_submission_constraints(result, settings)

    resources: dict[str, pulumi.Resource] = {}
    for descriptor in ResourceGraph(result.descriptors).ordered():
        resource_cls = RESOURCE_CLASSES[descriptor.resource_type]
        opts = None
        if descriptor.depends_on:
            opts = pulumi.ResourceOptions(
                depends_on=[resources[name] for name in descriptor.depends_on]
            )
        args = resolve_inputs(descriptor.inputs(), resources)
        resources[descriptor.logical_name] = resource_cls(
            descriptor.logical_name, opts=opts, **args
        )
        logger.debug("Registered %s as %s", descriptor.logical_name, resource_cls.__name__)

    return resources


def export_outputs(outputs: GraphOutputs, resources: dict[str, pulumi.Resource]) -> None:
    """Export the derived outputs as stack outputs; the API key as a secret."""
    pulumi.export("website_url", outputs.website_url)
    pulumi.export("bucket_name", outputs.bucket_name)
    for name in ("user_pool_id", "user_pool_client_id", "identity_pool_id", "graphql_url"):
        ref = getattr(outputs, name)
        if ref is not None:
            pulumi.export(name, resolve_ref(ref, resources))
    if outputs.api_key is not None:
        pulumi.export("api_key", pulumi.Output.secret(resolve_ref(outputs.api_key, resources)))


def settings_from_stack(
    stack_config: pulumi.Config, settings: SkyforgeSettings
) -> SkyforgeSettings:
    """Stack configuration overrides environment settings key by key."""
    overrides: dict[str, Any] = {}
    for name in ("region", "bucket_prefix", "connection_arn", "repository", "branch",
                 "project_name", "environment"):
        value = stack_config.get(name)
        if value is not None:
            overrides[name] = value
    for name in ("enable_auth", "enable_api", "force_destroy"):
        value = stack_config.get_bool(name)
        if value is not None:
            overrides[name] = value
    for name in ("buildspec_path", "site_index_path", "graphql_schema_path"):
        value = stack_config.get(name)
        if value is not None:
            overrides[name] = Path(value)
    window = stack_config.get_int("key_deletion_window_days")
    if window is not None:
        overrides["key_deletion_window_days"] = window
    if "region" not in overrides:
        aws_region = pulumi.Config("aws").get("region")
        if aws_region:
            overrides["region"] = aws_region

    return settings.model_copy(update=overrides)


def run() -> None:
    """Program body for ``pulumi up``: compose, guard, declare, export."""
    stack_config = pulumi.Config()
    settings = settings_from_stack(stack_config, SkyforgeSettings())
    config = InfrastructureConfig.from_settings(settings)
    # A pinned suffix keeps resource names stable across updates
    pinned = stack_config.get("suffix")
    result = build_infrastructure_graph(
        config, suffix=SuffixToken(value=pinned) if pinned else None
    )
    resources = declare_resources(result, settings)
    pulumi.export("suffix", result.suffix.value)
    export_outputs(result.outputs, resources)
    logger.info("Declared %d resources, fingerprint %s", len(resources), result.fingerprint)
