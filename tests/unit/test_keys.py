"""Tests for the encryption key and alias declarations."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from skyforge.core.keys import declare_encryption_key, declare_key_alias, rebind_alias
from skyforge.models.keys import EncryptionKey, KeyAlias
from skyforge.models.references import Ref


class TestEncryptionKey:
    def test_declared_with_default_window(self, key: EncryptionKey):
        assert key.logical_name == "artifact-key"
        assert key.deletion_window_in_days == 10
        assert key.inputs()["deletion_window_in_days"] == 10

    def test_custom_window(self):
        key = declare_encryption_key("site", deletion_window_in_days=7)
        assert key.deletion_window_in_days == 7

    @pytest.mark.parametrize("days", [6, 31])
    def test_window_out_of_range(self, days: int):
        with pytest.raises(ValidationError):
            declare_encryption_key("site", deletion_window_in_days=days)

    def test_arn_is_deferred(self, key: EncryptionKey):
        assert key.arn == Ref(target="artifact-key", attribute="arn")
        assert key.references() == []


class TestKeyAlias:
    def test_alias_targets_key(self, key: EncryptionKey):
        alias = declare_key_alias(key, "skyforge")
        assert alias.alias_name == "alias/skyforge-artifacts"
        assert alias.target_key == key.logical_name
        assert alias.inputs()["target_key_id"] == Ref(
            target="artifact-key", attribute="key_id"
        )
        assert alias.references() == ["artifact-key"]

    def test_alias_requires_prefix(self):
        with pytest.raises(ValidationError, match="alias/"):
            KeyAlias(logical_name="a", alias_name="skyforge", target_key="k")

    def test_reserved_prefix_rejected(self):
        with pytest.raises(ValidationError, match="reserved"):
            KeyAlias(logical_name="a", alias_name="alias/aws/s3", target_key="k")

    def test_alias_cannot_be_unbound(self):
        with pytest.raises(ValidationError):
            KeyAlias(logical_name="a", alias_name="alias/x")  # type: ignore[call-arg]

    def test_rebind_keeps_logical_name(self, key: EncryptionKey):
        alias = declare_key_alias(key, "skyforge")
        other = EncryptionKey(logical_name="other-key", description="rotated")
        rebound = rebind_alias(alias, other)
        assert rebound.logical_name == alias.logical_name
        assert rebound.alias_name == alias.alias_name
        assert rebound.target_key == "other-key"
        # The original descriptor is untouched
        assert alias.target_key == "artifact-key"
