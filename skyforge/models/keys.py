"""Encryption key and alias descriptors."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from skyforge.models.base import ResourceDescriptor
from skyforge.models.references import Ref


class EncryptionKey(ResourceDescriptor):
    """A managed encryption key used for pipeline artifacts."""

    resource_type: ClassVar[str] = "aws:kms/key:Key"

    description: str
    deletion_window_in_days: int = Field(default=10, ge=7, le=30)

    @property
    def arn(self) -> Ref:
        return self.ref("arn")

    @property
    def key_id(self) -> Ref:
        return self.ref("key_id")

    def inputs(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "deletion_window_in_days": self.deletion_window_in_days,
        }


class KeyAlias(ResourceDescriptor):
    """A human-readable name bound to exactly one encryption key.

    The target is part of the descriptor itself, so an alias can never be
    declared without one. Rebinding produces a new descriptor with the same
    logical name, which the engine applies as a single in-place update.
    """

    resource_type: ClassVar[str] = "aws:kms/alias:Alias"

    alias_name: str
    target_key: str  # logical_name of the EncryptionKey

    @field_validator("alias_name")
    @classmethod
    def _alias_prefix(cls, v: str) -> str:
        if not v.startswith("alias/"):
            raise ValueError(f"alias name must start with 'alias/': {v!r}")
        if v.startswith("alias/aws/"):
            raise ValueError(f"'alias/aws/' is reserved for provider-managed keys: {v!r}")
        return v

    def inputs(self) -> dict[str, Any]:
        return {
            "name": self.alias_name,
            "target_key_id": Ref(target=self.target_key, attribute="key_id"),
        }
