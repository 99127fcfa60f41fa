"""Skyforge data models — all Pydantic v2, all frozen (immutable)."""

from skyforge.models.auth import (
    ApiKey,
    ApiLayer,
    AuthLayer,
    GraphqlApi,
    IdentityPool,
    UserPool,
    UserPoolClient,
)
from skyforge.models.base import ResourceDescriptor
from skyforge.models.build import BuildJob, EnvironmentVariable
from skyforge.models.config import ConfigurationError, InfrastructureConfig
from skyforge.models.graph import (
    GraphOutputs,
    GraphResult,
    SourceConnection,
    SuffixToken,
)
from skyforge.models.keys import EncryptionKey, KeyAlias
from skyforge.models.pipeline import Pipeline, PipelineAction, PipelineStage
from skyforge.models.policies import (
    IamRole,
    IamRolePolicy,
    PolicyStatement,
    TrustPolicy,
)
from skyforge.models.references import FileSource, JsonDocument, Ref
from skyforge.models.storage import (
    BucketObject,
    BucketOwnershipControls,
    BucketPublicAccessBlock,
    BucketWebsite,
    StorageContainer,
)

__all__ = [
    # references
    "Ref",
    "FileSource",
    "JsonDocument",
    # base
    "ResourceDescriptor",
    # keys
    "EncryptionKey",
    "KeyAlias",
    # storage
    "StorageContainer",
    "BucketWebsite",
    "BucketOwnershipControls",
    "BucketPublicAccessBlock",
    "BucketObject",
    # policies
    "PolicyStatement",
    "TrustPolicy",
    "IamRole",
    "IamRolePolicy",
    # build
    "EnvironmentVariable",
    "BuildJob",
    # pipeline
    "PipelineAction",
    "PipelineStage",
    "Pipeline",
    # auth / api
    "UserPool",
    "UserPoolClient",
    "IdentityPool",
    "GraphqlApi",
    "ApiKey",
    "AuthLayer",
    "ApiLayer",
    # graph
    "SuffixToken",
    "SourceConnection",
    "GraphOutputs",
    "GraphResult",
    # config
    "InfrastructureConfig",
    "ConfigurationError",
]
