"""Build job descriptor and its environment variables."""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from skyforge.models.base import ResourceDescriptor
from skyforge.models.references import Ref

PIPELINE_SOURCE = "CODEPIPELINE"  # input and output flow through the pipeline


class EnvironmentVariable(BaseModel):
    """A named build variable whose value may be resolved late."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str | Ref
    type: Literal["PLAINTEXT", "PARAMETER_STORE", "SECRETS_MANAGER"] = "PLAINTEXT"

    def document(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value, "type": self.type}


class BuildJob(ResourceDescriptor):
    """A build project fed by, and feeding, the delivery pipeline."""

    resource_type: ClassVar[str] = "aws:codebuild/project:Project"

    project_name: str
    service_role: str  # logical_name of the IamRole
    buildspec: str
    environment_variables: tuple[EnvironmentVariable, ...] = ()
    encryption_key: str | None = None  # logical_name of the EncryptionKey
    compute_type: str = "BUILD_GENERAL1_SMALL"
    image: str = "aws/codebuild/standard:7.0"

    @field_validator("environment_variables")
    @classmethod
    def _unique_names(
        cls, v: tuple[EnvironmentVariable, ...]
    ) -> tuple[EnvironmentVariable, ...]:
        names = [var.name for var in v]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate environment variable names: {names}")
        return v

    @property
    def arn(self) -> Ref:
        return self.ref("arn")

    @property
    def variable_names(self) -> list[str]:
        return [var.name for var in self.environment_variables]

    def inputs(self) -> dict[str, Any]:
        args: dict[str, Any] = {
            "name": self.project_name,
            "service_role": Ref(target=self.service_role, attribute="arn"),
            "artifacts": {"type": PIPELINE_SOURCE},
            "source": {"type": PIPELINE_SOURCE, "buildspec": self.buildspec},
            "environment": {
                "compute_type": self.compute_type,
                "image": self.image,
                "type": "LINUX_CONTAINER",
                "environment_variables": [
                    var.document() for var in self.environment_variables
                ],
            },
        }
        if self.encryption_key:
            args["encryption_key"] = Ref(target=self.encryption_key, attribute="arn")
        return args
