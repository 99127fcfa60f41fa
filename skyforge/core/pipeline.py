"""Pipeline manager — Source -> Build -> Deploy.

Artifact names chain the stages: each stage's outputs must be exactly the
next stage's inputs. A broken chain is a configuration error and is raised
here, before anything reaches the engine.
"""

from __future__ import annotations

from collections.abc import Sequence

from skyforge.models.build import BuildJob
from skyforge.models.graph import SourceConnection
from skyforge.models.keys import EncryptionKey
from skyforge.models.pipeline import Pipeline, PipelineAction, PipelineStage
from skyforge.models.policies import IamRole
from skyforge.models.references import Ref
from skyforge.models.storage import StorageContainer

SOURCE_OUTPUT = "source_output"
BUILD_OUTPUT = "build_output"

STAGE_ORDER: tuple[str, ...] = ("Source", "Build", "Deploy")


class ArtifactChainError(ValueError):
    """Raised when adjacent stages disagree on artifact names."""


class StageOrderError(ValueError):
    """Raised when the stages are not exactly Source, Build, Deploy."""


def declare_source_stage(connection: SourceConnection) -> PipelineStage:
    return PipelineStage(
        name="Source",
        actions=(
            PipelineAction(
                name="Source",
                category="Source",
                provider="CodeStarSourceConnection",
                configuration={
                    "ConnectionArn": connection.connection_arn,
                    "FullRepositoryId": connection.repository,
                    "BranchName": connection.branch,
                    "OutputArtifactFormat": "CODE_ZIP",
                },
                output_artifacts=(SOURCE_OUTPUT,),
            ),
        ),
    )


def declare_build_stage(build_job: BuildJob) -> PipelineStage:
    return PipelineStage(
        name="Build",
        actions=(
            PipelineAction(
                name="Build",
                category="Build",
                provider="CodeBuild",
                configuration={"ProjectName": build_job.ref("name")},
                input_artifacts=(SOURCE_OUTPUT,),
                output_artifacts=(BUILD_OUTPUT,),
            ),
        ),
    )


def declare_deploy_stage(bucket: StorageContainer) -> PipelineStage:
    return PipelineStage(
        name="Deploy",
        actions=(
            PipelineAction(
                name="Deploy",
                category="Deploy",
                provider="S3",
                configuration={
                    "BucketName": Ref(target=bucket.logical_name, attribute="bucket"),
                    "Extract": "true",
                    "CannedACL": "public-read",
                },
                input_artifacts=(BUILD_OUTPUT,),
            ),
        ),
    )


def validate_stage_order(stages: Sequence[PipelineStage]) -> None:
    names = tuple(s.name for s in stages)
    if names != STAGE_ORDER:
        raise StageOrderError(
            f"Stages must be {' -> '.join(STAGE_ORDER)}, got {' -> '.join(names) or 'none'}"
        )
    for stage in stages:
        for action in stage.actions:
            if action.category != stage.name:
                raise StageOrderError(
                    f"Stage {stage.name!r} contains a {action.category} action {action.name!r}"
                )


def validate_artifact_chain(stages: Sequence[PipelineStage]) -> None:
    """Check ``stages[i].outputs == stages[i+1].inputs`` for every adjacent pair.

    The first stage consumes nothing and every later stage consumes exactly
    one artifact.
    """
    if stages and stages[0].input_artifacts:
        raise ArtifactChainError(
            f"First stage {stages[0].name!r} must not consume artifacts, "
            f"got {list(stages[0].input_artifacts)}"
        )
    for upstream, downstream in zip(stages, stages[1:]):
        if len(downstream.input_artifacts) != 1:
            raise ArtifactChainError(
                f"Stage {downstream.name!r} must consume exactly one artifact, "
                f"got {list(downstream.input_artifacts)}"
            )
        if upstream.output_artifacts != downstream.input_artifacts:
            raise ArtifactChainError(
                f"Stage {upstream.name!r} emits {list(upstream.output_artifacts)} "
                f"but {downstream.name!r} consumes {list(downstream.input_artifacts)}"
            )


def declare_pipeline(
    project_name: str,
    role: IamRole,
    bucket: StorageContainer,
    key: EncryptionKey,
    stages: Sequence[PipelineStage],
) -> Pipeline:
    """Validate *stages* and declare the pipeline that runs them."""
    stages = tuple(stages)
    validate_stage_order(stages)
    validate_artifact_chain(stages)
    return Pipeline(
        logical_name="site-pipeline",
        pipeline_name=f"{project_name}-pipeline",
        role=role.logical_name,
        artifact_bucket=bucket.logical_name,
        encryption_key=key.logical_name,
        stages=stages,
    )
