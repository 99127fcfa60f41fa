"""Storage container manager — the site bucket and its website settings."""

from __future__ import annotations

from pathlib import Path

from skyforge.models.graph import SuffixToken
from skyforge.models.references import FileSource
from skyforge.models.storage import (
    BucketObject,
    BucketOwnershipControls,
    BucketPublicAccessBlock,
    BucketWebsite,
    StorageContainer,
)


def declare_storage_container(
    prefix: str,
    suffix: SuffixToken,
    region: str,
    *,
    force_destroy: bool = False,
) -> StorageContainer:
    """Declare the bucket ``<prefix>-<suffix>``.

    Uniqueness is probabilistic. A name collision is reported by the engine
    when it creates the bucket and is not retried here.
    """
    return StorageContainer(
        logical_name="site-bucket",
        bucket_name=f"{prefix}-{suffix.value}",
        region=region,
        force_destroy=force_destroy,
    )


def compose_website_url(container: StorageContainer) -> str:
    """``http://<name>.s3-website-<region>.amazonaws.com``"""
    return f"http://{container.website_endpoint}"


def declare_website(
    container: StorageContainer, index_document: str = "index.html"
) -> BucketWebsite:
    return BucketWebsite(
        logical_name="site-website",
        bucket=container.logical_name,
        index_document=index_document,
    )


def declare_public_access(
    container: StorageContainer,
) -> tuple[BucketOwnershipControls, BucketPublicAccessBlock]:
    """Writer-owned objects and public ACLs allowed, as a public site needs."""
    ownership = BucketOwnershipControls(
        logical_name="site-ownership-controls",
        bucket=container.logical_name,
    )
    access_block = BucketPublicAccessBlock(
        logical_name="site-public-access-block",
        bucket=container.logical_name,
    )
    return ownership, access_block


def declare_site_index(
    container: StorageContainer,
    path: Path,
    *,
    after: tuple[str, ...],
    key: str = "index.html",
) -> BucketObject:
    """Upload the landing document once every setting in *after* exists.

    A ``public-read`` object is rejected until ownership controls and the
    public-access block are in place, hence the explicit ordering.
    """
    return BucketObject(
        logical_name=f"site-object-{key}",
        bucket=container.logical_name,
        key=key,
        source=FileSource(path=path),
        depends_on=after,
    )
