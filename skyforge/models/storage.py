"""Object-storage descriptors: the site container and its settings."""

from __future__ import annotations

import re
from typing import Any, ClassVar

from pydantic import field_validator

from skyforge.models.base import ResourceDescriptor
from skyforge.models.references import FileSource, Ref

_BUCKET_NAME = re.compile(r"^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")

WEBSITE_SERVICE_SUFFIX = "s3-website"
WEBSITE_DOMAIN = "amazonaws.com"


class StorageContainer(ResourceDescriptor):
    """A globally named bucket that hosts the site and pipeline artifacts.

    The bucket name is fixed at composition time, so its ARN and website
    endpoint are plain strings rather than deferred references.
    """

    resource_type: ClassVar[str] = "aws:s3/bucketV2:BucketV2"

    bucket_name: str
    region: str
    force_destroy: bool = False

    @field_validator("bucket_name")
    @classmethod
    def _valid_bucket_name(cls, v: str) -> str:
        if not _BUCKET_NAME.match(v) or "--" in v:
            raise ValueError(f"invalid bucket name: {v!r}")
        return v

    @property
    def arn(self) -> str:
        return f"arn:aws:s3:::{self.bucket_name}"

    @property
    def objects_arn(self) -> str:
        return f"{self.arn}/*"

    @property
    def website_endpoint(self) -> str:
        return f"{self.bucket_name}.{WEBSITE_SERVICE_SUFFIX}-{self.region}.{WEBSITE_DOMAIN}"

    def inputs(self) -> dict[str, Any]:
        return {"bucket": self.bucket_name, "force_destroy": self.force_destroy}


class _BucketSetting(ResourceDescriptor):
    bucket: str  # logical_name of the StorageContainer

    @property
    def bucket_id(self) -> Ref:
        return Ref(target=self.bucket, attribute="id")


class BucketWebsite(_BucketSetting):
    """Static-website hosting configuration."""

    resource_type: ClassVar[str] = (
        "aws:s3/bucketWebsiteConfigurationV2:BucketWebsiteConfigurationV2"
    )

    index_document: str = "index.html"
    error_document: str | None = None

    def inputs(self) -> dict[str, Any]:
        args: dict[str, Any] = {
            "bucket": self.bucket_id,
            "index_document": {"suffix": self.index_document},
        }
        if self.error_document:
            args["error_document"] = {"key": self.error_document}
        return args


class BucketOwnershipControls(_BucketSetting):
    """Uploaded objects are owned by the writer, which keeps object ACLs usable."""

    resource_type: ClassVar[str] = (
        "aws:s3/bucketOwnershipControls:BucketOwnershipControls"
    )

    object_ownership: str = "ObjectWriter"

    def inputs(self) -> dict[str, Any]:
        return {
            "bucket": self.bucket_id,
            "rule": {"object_ownership": self.object_ownership},
        }


class BucketPublicAccessBlock(_BucketSetting):
    """Public-access settings; public ACLs must stay allowed for the site."""

    resource_type: ClassVar[str] = (
        "aws:s3/bucketPublicAccessBlock:BucketPublicAccessBlock"
    )

    block_public_acls: bool = False
    block_public_policy: bool = False
    ignore_public_acls: bool = False
    restrict_public_buckets: bool = False

    def inputs(self) -> dict[str, Any]:
        return {
            "bucket": self.bucket_id,
            "block_public_acls": self.block_public_acls,
            "block_public_policy": self.block_public_policy,
            "ignore_public_acls": self.ignore_public_acls,
            "restrict_public_buckets": self.restrict_public_buckets,
        }


class BucketObject(_BucketSetting):
    """A single file uploaded into the container."""

    resource_type: ClassVar[str] = "aws:s3/bucketObject:BucketObject"

    key: str
    source: FileSource
    content_type: str = "text/html"
    acl: str = "public-read"

    def inputs(self) -> dict[str, Any]:
        return {
            "bucket": self.bucket_id,
            "key": self.key,
            "source": self.source,
            "content_type": self.content_type,
            "acl": self.acl,
        }
