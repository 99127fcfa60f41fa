"""Tests for env-driven settings and InfrastructureConfig."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from skyforge.config import SkyforgeSettings
from skyforge.models.config import ConfigurationError, InfrastructureConfig

from tests.conftest import BUILDSPEC, CONNECTION_ARN, REPOSITORY


class TestSkyforgeSettings:
    def test_defaults(self):
        settings = SkyforgeSettings(_env_file=None)
        assert settings.environment == "development"
        assert settings.region == "us-east-1"
        assert settings.enable_auth is False
        assert settings.buildspec_path == Path("buildspec.yml")

    def test_is_production(self):
        assert SkyforgeSettings(environment="production").is_production is True
        assert SkyforgeSettings(environment="staging").is_production is False

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SKYFORGE_REGION", "eu-west-1")
        monkeypatch.setenv("SKYFORGE_ENABLE_API", "true")
        settings = SkyforgeSettings(_env_file=None)
        assert settings.region == "eu-west-1"
        assert settings.enable_api is True


class TestFromSettings:
    def test_reads_buildspec(self, buildspec_file: Path):
        settings = SkyforgeSettings(
            connection_arn=CONNECTION_ARN, repository=REPOSITORY, buildspec_path=buildspec_file
        )
        config = InfrastructureConfig.from_settings(settings)
        assert config.buildspec == BUILDSPEC
        assert config.connection_arn == CONNECTION_ARN

    def test_missing_connection(self, buildspec_file: Path):
        settings = SkyforgeSettings(repository=REPOSITORY, buildspec_path=buildspec_file)
        with pytest.raises(ConfigurationError, match="connection_arn"):
            InfrastructureConfig.from_settings(settings)

    def test_missing_repository(self, buildspec_file: Path):
        settings = SkyforgeSettings(connection_arn=CONNECTION_ARN, buildspec_path=buildspec_file)
        with pytest.raises(ConfigurationError, match="repository"):
            InfrastructureConfig.from_settings(settings)

    def test_missing_buildspec_file(self, tmp_path: Path):
        settings = SkyforgeSettings(
            connection_arn=CONNECTION_ARN,
            repository=REPOSITORY,
            buildspec_path=tmp_path / "absent.yml",
        )
        with pytest.raises(ConfigurationError, match="build specification"):
            InfrastructureConfig.from_settings(settings)

    def test_schema_read_only_with_api(self, buildspec_file: Path, tmp_path: Path):
        schema = tmp_path / "schema.graphql"
        schema.write_text("type Query { a: Int }", encoding="utf-8")
        common = dict(
            connection_arn=CONNECTION_ARN,
            repository=REPOSITORY,
            buildspec_path=buildspec_file,
            graphql_schema_path=schema,
        )
        with_api = InfrastructureConfig.from_settings(SkyforgeSettings(enable_api=True, **common))
        without = InfrastructureConfig.from_settings(SkyforgeSettings(**common))
        assert with_api.graphql_schema == "type Query { a: Int }"
        assert without.graphql_schema is None


class TestInfrastructureConfig:
    def test_frozen(self):
        config = InfrastructureConfig(
            connection_arn=CONNECTION_ARN, repository=REPOSITORY, buildspec=BUILDSPEC
        )
        with pytest.raises(ValidationError):
            config.region = "eu-west-1"  # type: ignore[misc]

    def test_key_window_bounds(self):
        with pytest.raises(ValidationError):
            InfrastructureConfig(
                connection_arn=CONNECTION_ARN,
                repository=REPOSITORY,
                buildspec=BUILDSPEC,
                key_deletion_window_days=3,
            )
