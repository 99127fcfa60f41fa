"""Optional identity (user/identity pools) and GraphQL API descriptors."""

from __future__ import annotations

import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator

from skyforge.models.base import ResourceDescriptor
from skyforge.models.references import Ref

_IDENTITY_POOL_NAME = re.compile(r"^[\w ]+$")


class UserPool(ResourceDescriptor):
    resource_type: ClassVar[str] = "aws:cognito/userPool:UserPool"

    pool_name: str
    auto_verified_attributes: tuple[str, ...] = ("email",)
    username_attributes: tuple[str, ...] = ("email",)

    def inputs(self) -> dict[str, Any]:
        return {
            "name": self.pool_name,
            "auto_verified_attributes": list(self.auto_verified_attributes),
            "username_attributes": list(self.username_attributes),
        }


class UserPoolClient(ResourceDescriptor):
    """Hosted-UI client; signs users back in at the site URL."""

    resource_type: ClassVar[str] = "aws:cognito/userPoolClient:UserPoolClient"

    client_name: str
    user_pool: str  # logical_name of the UserPool
    callback_url: str
    oauth_scopes: tuple[str, ...] = ("email", "openid", "profile")

    def inputs(self) -> dict[str, Any]:
        return {
            "name": self.client_name,
            "user_pool_id": Ref(target=self.user_pool, attribute="id"),
            "generate_secret": False,
            "callback_urls": [self.callback_url],
            "logout_urls": [self.callback_url],
            "allowed_oauth_flows_user_pool_client": True,
            "allowed_oauth_flows": ["code"],
            "allowed_oauth_scopes": list(self.oauth_scopes),
            "supported_identity_providers": ["COGNITO"],
        }


class IdentityPool(ResourceDescriptor):
    resource_type: ClassVar[str] = "aws:cognito/identityPool:IdentityPool"

    identity_pool_name: str
    user_pool: str
    user_pool_client: str
    allow_unauthenticated_identities: bool = False

    @field_validator("identity_pool_name")
    @classmethod
    def _valid_name(cls, v: str) -> str:
        if not _IDENTITY_POOL_NAME.match(v):
            raise ValueError(
                f"identity pool names allow only letters, digits, '_' and spaces: {v!r}"
            )
        return v

    def inputs(self) -> dict[str, Any]:
        return {
            "identity_pool_name": self.identity_pool_name,
            "allow_unauthenticated_identities": self.allow_unauthenticated_identities,
            "cognito_identity_providers": [
                {
                    "client_id": Ref(target=self.user_pool_client, attribute="id"),
                    "provider_name": Ref(target=self.user_pool, attribute="endpoint"),
                    "server_side_token_check": False,
                }
            ],
        }


class GraphqlApi(ResourceDescriptor):
    resource_type: ClassVar[str] = "aws:appsync/graphQLApi:GraphQLApi"

    api_name: str
    authentication_type: str = "API_KEY"
    schema_definition: str | None = None

    @property
    def graphql_url(self) -> Ref:
        return self.ref("uris", key="GRAPHQL")

    def inputs(self) -> dict[str, Any]:
        args: dict[str, Any] = {
            "name": self.api_name,
            "authentication_type": self.authentication_type,
        }
        if self.schema_definition:
            args["schema"] = self.schema_definition
        return args


class ApiKey(ResourceDescriptor):
    resource_type: ClassVar[str] = "aws:appsync/apiKey:ApiKey"

    api: str  # logical_name of the GraphqlApi
    description: str = ""

    @property
    def value(self) -> Ref:
        return self.ref("key")

    def inputs(self) -> dict[str, Any]:
        args: dict[str, Any] = {"api_id": Ref(target=self.api, attribute="id")}
        if self.description:
            args["description"] = self.description
        return args


class AuthLayer(BaseModel):
    """The user pool, its client and the identity pool federating them."""

    model_config = ConfigDict(frozen=True)

    user_pool: UserPool
    user_pool_client: UserPoolClient
    identity_pool: IdentityPool

    @property
    def descriptors(self) -> tuple[ResourceDescriptor, ...]:
        return (self.user_pool, self.user_pool_client, self.identity_pool)


class ApiLayer(BaseModel):
    """The GraphQL API and the key clients use to call it."""

    model_config = ConfigDict(frozen=True)

    api: GraphqlApi
    api_key: ApiKey

    @property
    def descriptors(self) -> tuple[ResourceDescriptor, ...]:
        return (self.api, self.api_key)
