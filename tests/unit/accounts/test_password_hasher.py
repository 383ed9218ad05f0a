"""
Unit tests for PasswordHasher.
"""

import hashlib

from accounts.domain.password_hasher import PasswordHasher

LEGACY_SALT = "9f86d081884c7d659a2feaa0c55ad015"


def legacy_hash(password, salt=LEGACY_SALT):
    derived = hashlib.pbkdf2_hmac("sha512", password.encode(), salt.encode(), 10000, 64)
    return f"{salt}:{derived.hex()}"


class TestPasswordHasher:
    """Tests for hashing and verifying passwords."""

    def test_hash_is_salted(self, password_hasher):
        """Test two hashes of the same password differ."""
        first = password_hasher.hash("s3cret!")
        second = password_hasher.hash("s3cret!")

        assert first != second
        assert "s3cret!" not in first

    def test_verify(self, password_hasher):
        """Test correct and wrong passwords."""
        stored = password_hasher.hash("s3cret!")

        assert password_hasher.verify("s3cret!", stored) is True
        assert password_hasher.verify("wrong", stored) is False

    def test_pbkdf2_format(self):
        """Test PBKDF2 hashes are self-describing."""
        hasher = PasswordHasher("pbkdf2_sha256")
        stored = hasher.hash("s3cret!")

        algorithm, iterations, salt, digest = stored.split("$")
        assert algorithm == "pbkdf2_sha256"
        assert int(iterations) > 10000
        assert salt and digest
        assert hasher.verify("s3cret!", stored) is True

    def test_malformed_hash_fails_closed(self, password_hasher):
        """Test malformed hashes never raise."""
        for stored in ("garbage", "unknown$1$2$3", "pbkdf2_sha256$bad", "salt:not-hex", ""):
            assert password_hasher.verify("anything", stored) is False

    def test_empty_password_rejected_on_verify(self, password_hasher):
        """Test empty candidate never matches."""
        stored = password_hasher.hash("s3cret!")
        assert password_hasher.verify("", stored) is False

    def test_hash_empty_password(self, password_hasher):
        """Test hashing an empty password raises ValueError."""
        import pytest

        with pytest.raises(ValueError, match="cannot be empty"):
            password_hasher.hash("")


class TestLegacyHashes:
    """Tests for salt:hash records written by the desktop tool."""

    def test_is_legacy(self, password_hasher):
        """Test legacy layout detection."""
        assert PasswordHasher.is_legacy(legacy_hash("admin123")) is True
        assert PasswordHasher.is_legacy(password_hasher.hash("admin123")) is False

    def test_verify_legacy(self, password_hasher):
        """Test legacy hashes verify."""
        stored = legacy_hash("admin123")

        assert password_hasher.verify("admin123", stored) is True
        assert password_hasher.verify("admin124", stored) is False

    def test_legacy_needs_rehash(self, password_hasher):
        """Test legacy hashes are flagged for upgrade."""
        assert password_hasher.needs_rehash(legacy_hash("admin123")) is True

    def test_current_hash_does_not_need_rehash(self, password_hasher):
        """Test fresh hashes are current."""
        assert password_hasher.needs_rehash(password_hasher.hash("admin123")) is False

    def test_other_algorithm_needs_rehash(self, password_hasher):
        """Test hashes from a non-preferred algorithm are flagged."""
        stored = PasswordHasher("pbkdf2_sha256").hash("admin123")
        assert password_hasher.needs_rehash(stored) is True
