"""Optional identity and API layers."""

from __future__ import annotations

from skyforge.models.auth import (
    ApiKey,
    ApiLayer,
    AuthLayer,
    GraphqlApi,
    IdentityPool,
    UserPool,
    UserPoolClient,
)


def declare_auth_layer(project_name: str, callback_url: str) -> AuthLayer:
    """User pool, hosted-UI client returning to *callback_url*, identity pool."""
    user_pool = UserPool(logical_name="user-pool", pool_name=f"{project_name}-users")
    client = UserPoolClient(
        logical_name="user-pool-client",
        client_name=f"{project_name}-web",
        user_pool=user_pool.logical_name,
        callback_url=callback_url,
    )
    identity_pool = IdentityPool(
        logical_name="identity-pool",
        identity_pool_name=f"{project_name.replace('-', '_')}_identities",
        user_pool=user_pool.logical_name,
        user_pool_client=client.logical_name,
    )
    return AuthLayer(user_pool=user_pool, user_pool_client=client, identity_pool=identity_pool)


def declare_api_layer(project_name: str, schema: str | None = None) -> ApiLayer:
    api = GraphqlApi(
        logical_name="graphql-api",
        api_name=f"{project_name}-api",
        schema_definition=schema,
    )
    api_key = ApiKey(
        logical_name="graphql-api-key",
        api=api.logical_name,
        description=f"{project_name} site client key",
    )
    return ApiLayer(api=api, api_key=api_key)
