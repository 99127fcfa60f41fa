"""Tests for the optional identity and API layers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from skyforge.core.auth import declare_api_layer, declare_auth_layer
from skyforge.models.auth import IdentityPool
from skyforge.models.references import Ref

URL = "http://site.s3-website-us-east-1.amazonaws.com"


class TestAuthLayer:
    def test_descriptors(self):
        auth = declare_auth_layer("skyforge", URL)
        assert [d.logical_name for d in auth.descriptors] == [
            "user-pool", "user-pool-client", "identity-pool"
        ]

    def test_client_returns_to_site(self):
        client = declare_auth_layer("skyforge", URL).user_pool_client
        inputs = client.inputs()
        assert inputs["callback_urls"] == [URL]
        assert inputs["supported_identity_providers"] == ["COGNITO"]
        assert inputs["generate_secret"] is False
        assert client.references() == ["user-pool"]

    def test_identity_pool_federates_client(self):
        pool = declare_auth_layer("my-site", URL).identity_pool
        assert pool.identity_pool_name == "my_site_identities"
        provider = pool.inputs()["cognito_identity_providers"][0]
        assert provider["client_id"] == Ref(target="user-pool-client", attribute="id")
        assert provider["provider_name"] == Ref(target="user-pool", attribute="endpoint")
        assert pool.inputs()["allow_unauthenticated_identities"] is False

    def test_identity_pool_name_validated(self):
        with pytest.raises(ValidationError):
            IdentityPool(
                logical_name="p",
                identity_pool_name="has-dash",
                user_pool="u",
                user_pool_client="c",
            )


class TestApiLayer:
    def test_descriptors(self):
        api = declare_api_layer("skyforge", "type Query { a: Int }")
        assert [d.logical_name for d in api.descriptors] == ["graphql-api", "graphql-api-key"]
        assert api.api.inputs()["schema"] == "type Query { a: Int }"
        assert api.api.inputs()["authentication_type"] == "API_KEY"

    def test_without_schema(self):
        api = declare_api_layer("skyforge")
        assert "schema" not in api.api.inputs()

    def test_key_references_api(self):
        api = declare_api_layer("skyforge")
        assert api.api_key.references() == ["graphql-api"]
        assert api.api_key.value == Ref(target="graphql-api-key", attribute="key")
        assert api.api.graphql_url == Ref(target="graphql-api", attribute="uris", key="GRAPHQL")
