"""Deferred values: references, file sources and JSON documents.

Nothing in this module resolves anything. A ``Ref`` only names another
descriptor's attribute; the provisioning engine turns it into a concrete
value after that descriptor has been created.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict


class Ref(BaseModel):
    """A late-bound reference to an attribute of another descriptor.

    ``key`` indexes into a map-valued attribute, e.g. the ``GRAPHQL`` entry
    of an API's ``uris``.
    """

    model_config = ConfigDict(frozen=True)

    target: str  # logical_name of the referenced descriptor
    attribute: str = "id"
    key: str | None = None

    def __str__(self) -> str:
        path = f"{self.target}.{self.attribute}"
        if self.key is not None:
            path += f"[{self.key}]"
        return f"${{{path}}}"


class FileSource(BaseModel):
    """A local file uploaded by the engine as an asset."""

    model_config = ConfigDict(frozen=True)

    path: Path


class JsonDocument(BaseModel):
    """A structure the engine serializes to JSON after resolving its refs."""

    model_config = ConfigDict(frozen=True)

    body: dict[str, Any]


def iter_refs(value: Any) -> Iterator[Ref]:
    """Yield every ``Ref`` nested anywhere inside *value*."""
    if isinstance(value, Ref):
        yield value
    elif isinstance(value, JsonDocument):
        yield from iter_refs(value.body)
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_refs(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_refs(item)
