"""
Password hashing for activation users.

New hashes use Django's configured password hashers, which produce
self-describing strings (``algorithm$iterations$salt$hash``). Hashes
written by the earlier desktop tool (``salt:hash``, PBKDF2-HMAC-SHA512,
10,000 iterations, 64-byte key, hex encoded) are still accepted and
flagged for rehashing.
"""

import binascii
import hashlib
import logging

from django.contrib.auth.hashers import (
    check_password,
    get_hasher,
    identify_hasher,
    make_password,
)
from django.utils.crypto import constant_time_compare

logger = logging.getLogger(__name__)

LEGACY_ITERATIONS = 10000
LEGACY_KEY_LENGTH = 64
LEGACY_DIGEST = "sha512"


class PasswordHasher:
    """
    Salts, hashes and verifies user passwords.

    Verification fails closed: malformed or unknown hash formats
    return False instead of raising.
    """

    def __init__(self, algorithm: str = "default"):
        """
        Initialize the hasher.

        Args:
            algorithm: Django hasher algorithm name, or "default" for the
                first entry of PASSWORD_HASHERS
        """
        self.algorithm = algorithm

    def hash(self, plaintext: str) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            plaintext: Password in clear text

        Returns:
            Self-describing hash string
        """
        if not plaintext:
            raise ValueError("Password cannot be empty")
        return make_password(plaintext, hasher=self.algorithm)

    def verify(self, plaintext: str, stored: str) -> bool:
        """
        Verify a candidate password against a stored hash.

        Args:
            plaintext: Candidate password
            stored: Stored hash

        Returns:
            True if the password matches
        """
        if not plaintext or not stored:
            return False

        if self.is_legacy(stored):
            return self._verify_legacy(plaintext, stored)

        try:
            identify_hasher(stored)
        except ValueError:
            logger.warning("Unrecognized password hash format")
            return False

        try:
            return check_password(plaintext, stored)
        except (ValueError, TypeError):
            logger.warning("Malformed password hash")
            return False

    def needs_rehash(self, stored: str) -> bool:
        """
        Check whether a stored hash should be replaced after a login.

        Args:
            stored: Stored hash

        Returns:
            True for legacy hashes or hashes produced with outdated parameters
        """
        if self.is_legacy(stored):
            return True
        try:
            current = identify_hasher(stored)
        except ValueError:
            return False
        preferred = get_hasher(self.algorithm)
        if current.algorithm != preferred.algorithm:
            return True
        return preferred.must_update(stored)

    @staticmethod
    def is_legacy(stored: str) -> bool:
        """Check if a hash uses the legacy ``salt:hash`` layout."""
        if not stored or "$" in stored:
            return False
        parts = stored.split(":")
        return len(parts) == 2 and all(parts)

    @staticmethod
    def _verify_legacy(plaintext: str, stored: str) -> bool:
        """Verify a legacy ``salt:hash`` record."""
        salt, expected = stored.split(":", 1)
        try:
            binascii.unhexlify(expected)
        except (binascii.Error, ValueError):
            logger.warning("Malformed legacy password hash")
            return False

        derived = hashlib.pbkdf2_hmac(
            LEGACY_DIGEST,
            plaintext.encode("utf-8"),
            salt.encode("utf-8"),
            LEGACY_ITERATIONS,
            LEGACY_KEY_LENGTH,
        ).hex()
        return constant_time_compare(derived, expected.lower())
