"""Composition orchestrator — one pass from configuration to resource graph.

``build_infrastructure_graph`` declares every resource in dependency order:

    suffix -> key -> storage -> source connection -> build role
        -> [auth layer] -> [api layer] -> build job -> pipeline role
        -> pipeline -> public-access settings -> [site index upload]

Each step only references identifiers produced by an earlier step. Any
exception aborts the pass; no partial result is ever returned.
"""

from __future__ import annotations

import logging

from skyforge.core.auth import declare_api_layer, declare_auth_layer
from skyforge.core.build import declare_build_job, declare_build_variables
from skyforge.core.hasher import fingerprint_declarations
from skyforge.core.keys import declare_encryption_key, declare_key_alias
from skyforge.core.pipeline import (
    declare_build_stage,
    declare_deploy_stage,
    declare_pipeline,
    declare_source_stage,
)
from skyforge.core.policies import (
    declare_build_trust_policy,
    declare_pipeline_trust_policy,
    declare_service_role,
)
from skyforge.core.resource_graph import ResourceGraph
from skyforge.core.storage import (
    compose_website_url,
    declare_public_access,
    declare_site_index,
    declare_storage_container,
    declare_website,
)
from skyforge.core.submission_guard import enforce_submission_constraints
from skyforge.core.suffix import generate_suffix
from skyforge.models.auth import ApiLayer, AuthLayer
from skyforge.models.base import ResourceDescriptor
from skyforge.models.config import InfrastructureConfig
from skyforge.models.graph import GraphOutputs, GraphResult, SourceConnection, SuffixToken

logger = logging.getLogger(__name__)


def build_infrastructure_graph(
    config: InfrastructureConfig, *, suffix: SuffixToken | None = None
) -> GraphResult:
    """Compose the full resource graph for *config*.

    Parameters
    ----------
    config:
        Explicit configuration for this pass.
    suffix:
        Reuse a known suffix instead of generating one, e.g. to re-plan an
        existing deployment.

    Returns
    -------
    GraphResult
        All descriptors in declaration order plus the derived outputs.
    """
    descriptors: list[ResourceDescriptor] = []

    def declare(*items: ResourceDescriptor) -> None:
        for item in items:
            logger.debug("Declared %s (%s)", item.logical_name, item.resource_type)
            descriptors.append(item)

    suffix = suffix or generate_suffix()

    key = declare_encryption_key(
        config.project_name, deletion_window_in_days=config.key_deletion_window_days
    )
    declare(key, declare_key_alias(key, config.project_name))

    bucket = declare_storage_container(
        config.bucket_prefix, suffix, config.region, force_destroy=config.force_destroy
    )
    website = declare_website(bucket, config.index_document)
    declare(bucket, website)
    website_url = compose_website_url(bucket)

    connection = SourceConnection(
        connection_arn=config.connection_arn,
        repository=config.repository,
        branch=config.branch,
    )

    build_role, build_policy = declare_service_role(
        "build", config.project_name, declare_build_trust_policy(bucket, key)
    )
    declare(build_role, build_policy)

    auth: AuthLayer | None = None
    if config.enable_auth:
        auth = declare_auth_layer(config.project_name, website_url)
        declare(*auth.descriptors)

    api: ApiLayer | None = None
    if config.enable_api:
        api = declare_api_layer(config.project_name, config.graphql_schema)
        declare(*api.descriptors)

    build_job = declare_build_job(
        config.project_name,
        build_role,
        config.buildspec,
        declare_build_variables(config.region, website_url, auth=auth, api=api),
        key=key,
        image=config.build_image,
        compute_type=config.compute_type,
    )
    declare(build_job)

    pipeline_role, pipeline_policy = declare_service_role(
        "pipeline",
        config.project_name,
        declare_pipeline_trust_policy(bucket, key, connection.connection_arn, build_job),
    )
    declare(pipeline_role, pipeline_policy)

    declare(
        declare_pipeline(
            config.project_name,
            pipeline_role,
            bucket,
            key,
            [
                declare_source_stage(connection),
                declare_build_stage(build_job),
                declare_deploy_stage(bucket),
            ],
        )
    )

    ownership, access_block = declare_public_access(bucket)
    declare(ownership, access_block)

    if config.site_index_path is not None:
        declare(
            declare_site_index(
                bucket,
                config.site_index_path,
                key=config.index_document,
                after=(
                    website.logical_name,
                    ownership.logical_name,
                    access_block.logical_name,
                ),
            )
        )

    # Fails fast on unresolved references or cycles
    ResourceGraph(descriptors)

    result = GraphResult(
        suffix=suffix,
        connection=connection,
        descriptors=tuple(descriptors),
        outputs=GraphOutputs(
            website_url=website_url,
            bucket_name=bucket.bucket_name,
            user_pool_id=auth.user_pool.ref("id") if auth else None,
            user_pool_client_id=auth.user_pool_client.ref("id") if auth else None,
            identity_pool_id=auth.identity_pool.ref("id") if auth else None,
            graphql_url=api.api.graphql_url if api else None,
            api_key=api.api_key.value if api else None,
        ),
        fingerprint=fingerprint_declarations(descriptors),
    )
    enforce_submission_constraints(result)

    logger.info(
        "Composed %d resources for %s (suffix=%s, auth=%s, api=%s)",
        len(descriptors),
        config.project_name,
        suffix.value,
        config.enable_auth,
        config.enable_api,
    )
    return result
