"""Infrastructure configuration: the explicit input of a composition pass."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from skyforge.config import SkyforgeSettings


class ConfigurationError(ValueError):
    """Raised when settings cannot be turned into an InfrastructureConfig."""


class InfrastructureConfig(BaseModel):
    """Everything ``build_infrastructure_graph`` needs, and nothing else.

    Built from ``SkyforgeSettings`` (environment / .env) or from Pulumi stack
    configuration. File contents are read here, once, so the composition
    itself performs no I/O.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = "skyforge"
    environment: str = "development"
    region: str = "us-east-1"
    bucket_prefix: str = "skyforge-site"
    key_deletion_window_days: int = Field(default=10, ge=7, le=30)
    force_destroy: bool = False

    # Source repository behind an existing connection
    connection_arn: str
    repository: str
    branch: str = "main"

    # Build
    buildspec: str
    build_image: str = "aws/codebuild/standard:7.0"
    compute_type: str = "BUILD_GENERAL1_SMALL"

    # Site
    index_document: str = "index.html"
    site_index_path: Path | None = None

    # Optional layers
    enable_auth: bool = False
    enable_api: bool = False
    graphql_schema: str | None = None

    @classmethod
    def from_settings(cls, settings: SkyforgeSettings) -> InfrastructureConfig:
        """Build a config from settings, reading the referenced files."""
        if not settings.connection_arn:
            raise ConfigurationError(
                "connection_arn is required. Set SKYFORGE_CONNECTION_ARN."
            )
        if not settings.repository:
            raise ConfigurationError(
                "repository is required. Set SKYFORGE_REPOSITORY=owner/repo."
            )

        graphql_schema = None
        if settings.enable_api and settings.graphql_schema_path is not None:
            graphql_schema = _read_text(settings.graphql_schema_path, "GraphQL schema")

        return cls(
            project_name=settings.project_name,
            environment=settings.environment,
            region=settings.region,
            bucket_prefix=settings.bucket_prefix,
            key_deletion_window_days=settings.key_deletion_window_days,
            force_destroy=settings.force_destroy,
            connection_arn=settings.connection_arn,
            repository=settings.repository,
            branch=settings.branch,
            buildspec=_read_text(settings.buildspec_path, "build specification"),
            site_index_path=settings.site_index_path,
            enable_auth=settings.enable_auth,
            enable_api=settings.enable_api,
            graphql_schema=graphql_schema,
        )


def _read_text(path: Path, what: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigurationError(f"{what} file not found: {path}") from exc
