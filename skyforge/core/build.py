"""Build job manager — the build project and its environment variables.

Variable values may be ``Ref``s to resources that do not exist yet (pool
identifiers, the API key). The job is declared anyway; the engine
substitutes the concrete values once those resources resolve.
"""

from __future__ import annotations

from collections.abc import Iterable

from skyforge.models.auth import ApiLayer, AuthLayer
from skyforge.models.build import BuildJob, EnvironmentVariable
from skyforge.models.keys import EncryptionKey
from skyforge.models.policies import IamRole
from skyforge.models.references import Ref

REGION = "REGION"
CALLBACK_URL = "CALLBACK_URL"
USER_POOL_ID = "USER_POOL_ID"
USER_POOL_CLIENT_ID = "USER_POOL_CLIENT_ID"
IDENTITY_POOL_ID = "IDENTITY_POOL_ID"
GRAPHQL_URL = "GRAPHQL_URL"
API_KEY = "API_KEY"


class DuplicateVariableError(ValueError):
    """Raised when two build variables share a name."""


def declare_build_variables(
    region: str,
    callback_url: str,
    *,
    auth: AuthLayer | None = None,
    api: ApiLayer | None = None,
) -> list[EnvironmentVariable]:
    """The variables the site build reads, given the enabled layers."""
    pairs: list[tuple[str, str | Ref]] = [
        (REGION, region),
        (CALLBACK_URL, callback_url),
    ]
    if auth is not None:
        pairs += [
            (USER_POOL_ID, auth.user_pool.ref("id")),
            (USER_POOL_CLIENT_ID, auth.user_pool_client.ref("id")),
            (IDENTITY_POOL_ID, auth.identity_pool.ref("id")),
        ]
    if api is not None:
        pairs += [
            (GRAPHQL_URL, api.api.graphql_url),
            (API_KEY, api.api_key.value),
        ]
    return [EnvironmentVariable(name=name, value=value) for name, value in pairs]


def declare_build_job(
    project_name: str,
    role: IamRole,
    buildspec: str,
    variables: Iterable[EnvironmentVariable],
    *,
    key: EncryptionKey | None = None,
    image: str = "aws/codebuild/standard:7.0",
    compute_type: str = "BUILD_GENERAL1_SMALL",
) -> BuildJob:
    """Declare the build project that runs *buildspec* inside the pipeline."""
    variables = tuple(variables)
    seen: set[str] = set()
    for var in variables:
        if var.name in seen:
            raise DuplicateVariableError(
                f"Build variable {var.name!r} is declared more than once"
            )
        seen.add(var.name)

    return BuildJob(
        logical_name="site-build",
        project_name=f"{project_name}-build",
        service_role=role.logical_name,
        buildspec=buildspec,
        environment_variables=variables,
        encryption_key=key.logical_name if key is not None else None,
        image=image,
        compute_type=compute_type,
    )
