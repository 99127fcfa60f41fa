"""Key manager — the artifact encryption key and its alias."""

from __future__ import annotations

from skyforge.models.keys import EncryptionKey, KeyAlias

DEFAULT_DELETION_WINDOW_DAYS = 10


def declare_encryption_key(
    project_name: str,
    *,
    deletion_window_in_days: int = DEFAULT_DELETION_WINDOW_DAYS,
) -> EncryptionKey:
    return EncryptionKey(
        logical_name="artifact-key",
        description=f"{project_name} pipeline artifact encryption",
        deletion_window_in_days=deletion_window_in_days,
    )


def declare_key_alias(key: EncryptionKey, project_name: str) -> KeyAlias:
    return KeyAlias(
        logical_name="artifact-key-alias",
        alias_name=f"alias/{project_name}-artifacts",
        target_key=key.logical_name,
    )


def rebind_alias(alias: KeyAlias, key: EncryptionKey) -> KeyAlias:
    """Point *alias* at *key*.

    Returns a new alias descriptor with the same logical name, so the
    engine sees a single update of the target and never an unbound alias.
    """
    return KeyAlias(
        logical_name=alias.logical_name,
        alias_name=alias.alias_name,
        target_key=key.logical_name,
        depends_on=alias.depends_on,
    )
