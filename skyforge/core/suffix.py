"""Random suffix for globally named resources."""

from __future__ import annotations

import secrets
import string

from skyforge.models.graph import SUFFIX_LENGTH, SuffixToken

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_suffix() -> SuffixToken:
    """Return a fresh lowercase alphanumeric token of ``SUFFIX_LENGTH`` characters.

    Tokens are not reproducible across runs; a composition pass generates
    one and threads it through every name that must be globally unique.
    """
    return SuffixToken(
        value="".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    )
