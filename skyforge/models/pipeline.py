"""Delivery pipeline descriptor: stages, actions and artifact names."""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from skyforge.models.base import ResourceDescriptor
from skyforge.models.references import Ref

ActionCategory = Literal["Source", "Build", "Deploy"]


class PipelineAction(BaseModel):
    """A single action inside a stage."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: ActionCategory
    provider: str  # "CodeStarSourceConnection", "CodeBuild", "S3"
    owner: str = "AWS"
    version: str = "1"
    configuration: dict[str, str | Ref] = {}
    input_artifacts: tuple[str, ...] = ()
    output_artifacts: tuple[str, ...] = ()

    def document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "owner": self.owner,
            "provider": self.provider,
            "version": self.version,
            "configuration": dict(self.configuration),
            "input_artifacts": list(self.input_artifacts),
            "output_artifacts": list(self.output_artifacts),
        }


class PipelineStage(BaseModel):
    """A named pipeline phase; its artifacts are those of its actions."""

    model_config = ConfigDict(frozen=True)

    name: str
    actions: tuple[PipelineAction, ...]

    @field_validator("actions")
    @classmethod
    def _has_actions(cls, v: tuple[PipelineAction, ...]) -> tuple[PipelineAction, ...]:
        if not v:
            raise ValueError("a stage needs at least one action")
        return v

    @property
    def input_artifacts(self) -> tuple[str, ...]:
        return tuple(a for action in self.actions for a in action.input_artifacts)

    @property
    def output_artifacts(self) -> tuple[str, ...]:
        return tuple(a for action in self.actions for a in action.output_artifacts)

    def document(self) -> dict[str, Any]:
        return {"name": self.name, "actions": [a.document() for a in self.actions]}


class Pipeline(ResourceDescriptor):
    """The Source -> Build -> Deploy workflow for the site."""

    resource_type: ClassVar[str] = "aws:codepipeline/pipeline:Pipeline"

    pipeline_name: str
    role: str  # logical_name of the pipeline IamRole
    artifact_bucket: str  # logical_name of the StorageContainer
    encryption_key: str  # logical_name of the EncryptionKey
    stages: tuple[PipelineStage, ...]

    @property
    def stage_names(self) -> list[str]:
        return [s.name for s in self.stages]

    def inputs(self) -> dict[str, Any]:
        return {
            "name": self.pipeline_name,
            "role_arn": Ref(target=self.role, attribute="arn"),
            "artifact_stores": [
                {
                    "location": Ref(target=self.artifact_bucket, attribute="bucket"),
                    "type": "S3",
                    "encryption_key": {
                        "id": Ref(target=self.encryption_key, attribute="arn"),
                        "type": "KMS",
                    },
                }
            ],
            "stages": [s.document() for s in self.stages],
        }
