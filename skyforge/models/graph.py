"""Composition-pass models: suffix, source connection, outputs and result."""

from __future__ import annotations

import re
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

from skyforge.models.base import ResourceDescriptor
from skyforge.models.references import Ref

SUFFIX_LENGTH = 8
_SUFFIX = re.compile(rf"^[a-z0-9]{{{SUFFIX_LENGTH}}}$")
_REPOSITORY = re.compile(r"^[\w.-]+/[\w.-]+$")

D = TypeVar("D", bound=ResourceDescriptor)


class SuffixToken(BaseModel):
    """Random 8-character lowercase alphanumeric token, one per composition pass."""

    model_config = ConfigDict(frozen=True)

    value: str

    @field_validator("value")
    @classmethod
    def _lower_alnum(cls, v: str) -> str:
        if not _SUFFIX.fullmatch(v):
            raise ValueError(
                f"suffix must be {SUFFIX_LENGTH} lowercase alphanumeric characters: {v!r}"
            )
        return v

    def __str__(self) -> str:
        return self.value


class SourceConnection(BaseModel):
    """An already-authorized link to a repository, referenced but never managed."""

    model_config = ConfigDict(frozen=True)

    connection_arn: str
    repository: str  # "owner/repo"
    branch: str = "main"

    @field_validator("repository")
    @classmethod
    def _owner_repo(cls, v: str) -> str:
        if not _REPOSITORY.match(v):
            raise ValueError(f"repository must look like 'owner/repo': {v!r}")
        return v

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]


class GraphOutputs(BaseModel):
    """Values published at the end of a pass.

    Identifiers of optional components are ``None`` when the component is
    disabled and a ``Ref`` otherwise; the engine resolves them on export.
    """

    model_config = ConfigDict(frozen=True)

    website_url: str
    bucket_name: str
    user_pool_id: Ref | None = None
    user_pool_client_id: Ref | None = None
    identity_pool_id: Ref | None = None
    graphql_url: Ref | None = None
    api_key: Ref | None = None

    def describe(self) -> dict[str, str]:
        """Render every published output as text, deferred values as ``${ref}``."""
        out: dict[str, str] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is not None:
                out[name] = str(value)
        return out


class GraphResult(BaseModel):
    """Everything one composition pass produced, in declaration order."""

    model_config = ConfigDict(frozen=True)

    suffix: SuffixToken
    connection: SourceConnection
    descriptors: tuple[ResourceDescriptor, ...]
    outputs: GraphOutputs
    fingerprint: str  # "sha256:<hex>" over all declarations

    @property
    def logical_names(self) -> list[str]:
        return [d.logical_name for d in self.descriptors]

    def get(self, logical_name: str) -> ResourceDescriptor:
        for d in self.descriptors:
            if d.logical_name == logical_name:
                return d
        raise KeyError(logical_name)

    def of_type(self, kind: type[D]) -> list[D]:
        return [d for d in self.descriptors if isinstance(d, kind)]

    def one(self, kind: type[D]) -> D:
        """Return the single descriptor of *kind*; raises if there is not exactly one."""
        found = self.of_type(kind)
        if len(found) != 1:
            raise LookupError(f"expected one {kind.__name__}, found {len(found)}")
        return found[0]

    def summary(self) -> dict[str, Any]:
        return {
            "suffix": self.suffix.value,
            "resources": len(self.descriptors),
            "fingerprint": self.fingerprint,
        }
