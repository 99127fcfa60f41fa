"""End-to-end integration tests: settings -> config -> graph -> guard.

These tests exercise SkyforgeSettings, InfrastructureConfig, the declare
functions, ResourceGraph, the hasher and the submission guard together.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from skyforge.config import SkyforgeSettings
from skyforge.core.orchestrator import build_infrastructure_graph
from skyforge.core.resource_graph import ResourceGraph
from skyforge.core.submission_guard import enforce_submission_constraints
from skyforge.models.build import BuildJob
from skyforge.models.config import InfrastructureConfig
from skyforge.models.graph import GraphResult
from skyforge.models.policies import IamRole, IamRolePolicy

from tests.conftest import CONNECTION_ARN, REPOSITORY


class TestFullGraph:
    """Every variant composes, orders and passes the guard."""

    @pytest.fixture(params=[(False, False), (True, False), (False, True), (True, True)])
    def result(self, request, buildspec_file: Path, index_file: Path) -> GraphResult:
        auth, api = request.param
        settings = SkyforgeSettings(
            _env_file=None,
            connection_arn=CONNECTION_ARN,
            repository=REPOSITORY,
            buildspec_path=buildspec_file,
            site_index_path=index_file,
            enable_auth=auth,
            enable_api=api,
        )
        return build_infrastructure_graph(InfrastructureConfig.from_settings(settings))

    def test_guard_passes(self, result: GraphResult):
        enforce_submission_constraints(result, SkyforgeSettings(_env_file=None))

    def test_every_reference_points_backwards(self, result: GraphResult):
        """Each step only references identifiers from earlier steps."""
        seen: set[str] = set()
        for descriptor in result.descriptors:
            assert set(descriptor.references()) <= seen, descriptor.logical_name
            seen.add(descriptor.logical_name)

    def test_creation_order_matches_declaration(self, result: GraphResult):
        assert ResourceGraph(result.descriptors).logical_names == result.logical_names

    def test_two_roles_two_principals(self, result: GraphResult):
        roles = result.of_type(IamRole)
        assert len(roles) == 2
        assert len({r.trust.principal for r in roles}) == 2
        assert len(result.of_type(IamRolePolicy)) == 2

    def test_build_variables_match_layers(self, result: GraphResult):
        names = result.one(BuildJob).variable_names
        has_auth = "user-pool" in result.logical_names
        has_api = "graphql-api" in result.logical_names
        assert ("USER_POOL_ID" in names) == has_auth
        assert ("GRAPHQL_URL" in names) == has_api
        assert len(names) == len(set(names))

    def test_suffix_everywhere(self, result: GraphResult):
        assert result.suffix.value in result.outputs.bucket_name
        assert result.suffix.value in result.outputs.website_url


class TestSeparatePasses:
    def test_passes_get_distinct_suffixes(self, infra_config: InfrastructureConfig):
        first = build_infrastructure_graph(infra_config)
        second = build_infrastructure_graph(infra_config)
        assert first.suffix != second.suffix
        assert first.outputs.bucket_name != second.outputs.bucket_name
