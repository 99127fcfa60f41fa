"""Canonical hashing of declarations for graph fingerprints.

Two passes with the same configuration and suffix produce the same
fingerprint; any change to a declared input changes it.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from skyforge.models.base import ResourceDescriptor


def _encode(obj: Any) -> Any:
    """JSON fallback for refs, file sources, documents and paths."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, Path):
        return obj.as_posix()
    raise TypeError(f"Cannot canonicalize {type(obj).__name__}")


def canonical_json_bytes(obj: Any) -> bytes:
    """Serialize *obj* so that equal declarations always give equal bytes.

    Sorted keys and compact ASCII output keep the bytes independent of
    dict insertion order.
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True, default=_encode
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Hex SHA-256 of *data*."""
    return hashlib.sha256(data).hexdigest()


def content_address(obj: Any) -> str:
    """Fingerprint *obj* as ``sha256:<hex>`` over its canonical JSON."""
    return f"sha256:{sha256_hex(canonical_json_bytes(obj))}"


def fingerprint_declarations(descriptors: Iterable[ResourceDescriptor]) -> str:
    """Content address of every descriptor's type, name, inputs and ordering edges."""
    payload = [
        {
            "name": d.logical_name,
            "type": d.resource_type,
            "inputs": d.inputs(),
            "depends_on": list(d.depends_on),
        }
        for d in descriptors
    ]
    return content_address(payload)
