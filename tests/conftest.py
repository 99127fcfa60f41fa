"""Shared test fixtures for Skyforge."""

from __future__ import annotations

from pathlib import Path

import pytest

from skyforge.core.keys import declare_encryption_key
from skyforge.core.orchestrator import build_infrastructure_graph
from skyforge.core.storage import declare_storage_container
from skyforge.models.config import InfrastructureConfig
from skyforge.models.graph import GraphResult, SuffixToken
from skyforge.models.keys import EncryptionKey
from skyforge.models.storage import StorageContainer

CONNECTION_ARN = (
    "arn:aws:codestar-connections:us-east-1:123456789012:connection/test-connection"
)
REPOSITORY = "acme/website"
BUILDSPEC = "version: 0.2\nphases:\n  build:\n    commands:\n      - npm run build\n"
SCHEMA = "type Query { hello: String }"


@pytest.fixture
def suffix() -> SuffixToken:
    """A fixed suffix so names are predictable."""
    return SuffixToken(value="abc123xy")


@pytest.fixture
def buildspec_file(tmp_path: Path) -> Path:
    """Provide a build specification on disk."""
    path = tmp_path / "buildspec.yml"
    path.write_text(BUILDSPEC, encoding="utf-8")
    return path


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    """Provide a landing page on disk."""
    path = tmp_path / "index.html"
    path.write_text("<h1>hello</h1>", encoding="utf-8")
    return path


@pytest.fixture
def infra_config() -> InfrastructureConfig:
    """Minimal configuration: no optional layers, no index upload."""
    return InfrastructureConfig(
        connection_arn=CONNECTION_ARN,
        repository=REPOSITORY,
        buildspec=BUILDSPEC,
    )


@pytest.fixture
def full_config(index_file: Path) -> InfrastructureConfig:
    """Configuration with auth, API and the index upload enabled."""
    return InfrastructureConfig(
        connection_arn=CONNECTION_ARN,
        repository=REPOSITORY,
        buildspec=BUILDSPEC,
        site_index_path=index_file,
        enable_auth=True,
        enable_api=True,
        graphql_schema=SCHEMA,
    )


@pytest.fixture
def graph_result(infra_config: InfrastructureConfig, suffix: SuffixToken) -> GraphResult:
    """Provide a composed minimal graph."""
    return build_infrastructure_graph(infra_config, suffix=suffix)


@pytest.fixture
def full_result(full_config: InfrastructureConfig, suffix: SuffixToken) -> GraphResult:
    """Provide a composed graph with every optional layer."""
    return build_infrastructure_graph(full_config, suffix=suffix)


@pytest.fixture
def bucket(suffix: SuffixToken) -> StorageContainer:
    return declare_storage_container("skyforge-site", suffix, "us-east-1")


@pytest.fixture
def key() -> EncryptionKey:
    return declare_encryption_key("skyforge")
