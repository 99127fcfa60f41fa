"""Tests for build variables and the build job."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from skyforge.core.auth import declare_api_layer, declare_auth_layer
from skyforge.core.build import (
    API_KEY,
    CALLBACK_URL,
    GRAPHQL_URL,
    IDENTITY_POOL_ID,
    REGION,
    USER_POOL_CLIENT_ID,
    USER_POOL_ID,
    DuplicateVariableError,
    declare_build_job,
    declare_build_variables,
)
from skyforge.core.policies import declare_build_trust_policy, declare_service_role
from skyforge.models.build import BuildJob, EnvironmentVariable
from skyforge.models.keys import EncryptionKey
from skyforge.models.policies import IamRole
from skyforge.models.references import Ref
from skyforge.models.storage import StorageContainer

URL = "http://site.s3-website-us-east-1.amazonaws.com"


@pytest.fixture
def build_role(bucket: StorageContainer, key: EncryptionKey) -> IamRole:
    role, _ = declare_service_role(
        "build", "skyforge", declare_build_trust_policy(bucket, key)
    )
    return role


class TestBuildVariables:
    def test_base_variables(self):
        variables = declare_build_variables("us-east-1", URL)
        assert [v.name for v in variables] == [REGION, CALLBACK_URL]
        assert variables[1].value == URL

    def test_auth_variables_are_deferred(self):
        auth = declare_auth_layer("skyforge", URL)
        variables = {v.name: v.value for v in declare_build_variables("us-east-1", URL, auth=auth)}
        assert variables[USER_POOL_ID] == Ref(target="user-pool", attribute="id")
        assert variables[USER_POOL_CLIENT_ID] == Ref(target="user-pool-client", attribute="id")
        assert variables[IDENTITY_POOL_ID] == Ref(target="identity-pool", attribute="id")

    def test_api_variables_are_deferred(self):
        api = declare_api_layer("skyforge")
        variables = {v.name: v.value for v in declare_build_variables("us-east-1", URL, api=api)}
        assert variables[GRAPHQL_URL] == Ref(target="graphql-api", attribute="uris", key="GRAPHQL")
        assert variables[API_KEY] == Ref(target="graphql-api-key", attribute="key")
        assert USER_POOL_ID not in variables


class TestBuildJob:
    def test_declared(self, build_role: IamRole, key: EncryptionKey):
        job = declare_build_job(
            "skyforge", build_role, "version: 0.2", declare_build_variables("us-east-1", URL), key=key
        )
        assert job.logical_name == "site-build"
        assert job.project_name == "skyforge-build"
        inputs = job.inputs()
        assert inputs["source"] == {"type": "CODEPIPELINE", "buildspec": "version: 0.2"}
        assert inputs["artifacts"] == {"type": "CODEPIPELINE"}
        assert inputs["service_role"] == Ref(target="build-role", attribute="arn")
        assert inputs["encryption_key"] == Ref(target="artifact-key", attribute="arn")

    def test_references_include_pending_resources(self, build_role: IamRole):
        auth = declare_auth_layer("skyforge", URL)
        job = declare_build_job(
            "skyforge", build_role, "version: 0.2",
            declare_build_variables("us-east-1", URL, auth=auth),
        )
        assert set(job.references()) == {
            "build-role", "user-pool", "user-pool-client", "identity-pool"
        }

    def test_duplicate_variable_rejected(self, build_role: IamRole):
        variables = [
            EnvironmentVariable(name=REGION, value="us-east-1"),
            EnvironmentVariable(name=REGION, value="eu-west-1"),
        ]
        with pytest.raises(DuplicateVariableError, match=REGION):
            declare_build_job("skyforge", build_role, "version: 0.2", variables)

    def test_model_rejects_duplicates(self):
        with pytest.raises(ValidationError, match="duplicate"):
            BuildJob(
                logical_name="b",
                project_name="b",
                service_role="r",
                buildspec="",
                environment_variables=(
                    EnvironmentVariable(name="A", value="1"),
                    EnvironmentVariable(name="A", value="2"),
                ),
            )

    def test_no_key_means_no_encryption_input(self, build_role: IamRole):
        job = declare_build_job("skyforge", build_role, "version: 0.2", [])
        assert "encryption_key" not in job.inputs()
