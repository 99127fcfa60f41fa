"""Runtime settings — env-driven, .env aware.

Centralized settings using pydantic-settings. Reads from a .env file and
SKYFORGE_* environment variables. ``InfrastructureConfig.from_settings``
turns these into the explicit configuration of a composition pass.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class SkyforgeSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export SKYFORGE_REGION=eu-west-1
        export SKYFORGE_CONNECTION_ARN=arn:aws:codestar-connections:eu-west-1:123456789012:connection/abc
        export SKYFORGE_REPOSITORY=acme/website
        export SKYFORGE_ENABLE_AUTH=true

    Or via .env file::

        SKYFORGE_ENVIRONMENT=production
        SKYFORGE_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SKYFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Naming and placement
    project_name: str = "skyforge"
    region: str = "us-east-1"
    bucket_prefix: str = "skyforge-site"
    key_deletion_window_days: int = 10
    force_destroy: bool = False

    # Source repository
    connection_arn: str = ""
    repository: str = ""  # owner/repo
    branch: str = "main"

    # Files read at composition time
    buildspec_path: Path = Path("buildspec.yml")
    site_index_path: Path | None = None
    graphql_schema_path: Path | None = None

    # Optional layers
    enable_auth: bool = False
    enable_api: bool = False

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"
