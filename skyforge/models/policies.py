"""Identity descriptors: trust policies, roles and inline role policies."""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from skyforge.models.base import ResourceDescriptor
from skyforge.models.references import JsonDocument, Ref

POLICY_VERSION = "2012-10-17"
WILDCARD = "*"


class PolicyStatement(BaseModel):
    """One permission statement: a set of actions over a resource scope."""

    model_config = ConfigDict(frozen=True)

    sid: str
    actions: tuple[str, ...]
    resources: tuple[str | Ref, ...]
    effect: Literal["Allow", "Deny"] = "Allow"

    @field_validator("actions", "resources")
    @classmethod
    def _not_empty(cls, v: tuple[Any, ...]) -> tuple[Any, ...]:
        if not v:
            raise ValueError("statement must list at least one entry")
        return v

    @property
    def has_wildcard_resource(self) -> bool:
        return any(r == WILDCARD for r in self.resources)

    def document(self) -> dict[str, Any]:
        return {
            "Sid": self.sid,
            "Effect": self.effect,
            "Action": list(self.actions),
            "Resource": list(self.resources),
        }


class TrustPolicy(BaseModel):
    """The principal allowed to assume a role and what that role may do."""

    model_config = ConfigDict(frozen=True)

    principal: str  # service principal, e.g. "codebuild.amazonaws.com"
    statements: tuple[PolicyStatement, ...]

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(a for s in self.statements for a in s.actions)

    @property
    def resources(self) -> tuple[str | Ref, ...]:
        return tuple(r for s in self.statements for r in s.resources)

    def assume_role_document(self) -> dict[str, Any]:
        return {
            "Version": POLICY_VERSION,
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"Service": self.principal},
                    "Action": "sts:AssumeRole",
                }
            ],
        }

    def permissions_document(self) -> dict[str, Any]:
        return {
            "Version": POLICY_VERSION,
            "Statement": [s.document() for s in self.statements],
        }


class IamRole(ResourceDescriptor):
    """A role assumable only by the trust policy's principal."""

    resource_type: ClassVar[str] = "aws:iam/role:Role"

    role_name: str
    trust: TrustPolicy

    @property
    def arn(self) -> Ref:
        return self.ref("arn")

    def inputs(self) -> dict[str, Any]:
        return {
            "name": self.role_name,
            "assume_role_policy": JsonDocument(body=self.trust.assume_role_document()),
        }


class IamRolePolicy(ResourceDescriptor):
    """The inline permission set attached to a role."""

    resource_type: ClassVar[str] = "aws:iam/rolePolicy:RolePolicy"

    policy_name: str
    role: str  # logical_name of the IamRole
    trust: TrustPolicy

    def inputs(self) -> dict[str, Any]:
        return {
            "name": self.policy_name,
            "role": Ref(target=self.role, attribute="id"),
            "policy": JsonDocument(body=self.trust.permissions_document()),
        }
