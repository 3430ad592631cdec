# apps/core/hashers.py
"""
Password hashing.

bcrypt with a fixed work factor. Each call salts independently, so hashing the
same password twice yields two different digests that both verify.
"""

import logging

from django.contrib.auth.hashers import (
    BCryptSHA256PasswordHasher,
    check_password,
    make_password,
)

logger = logging.getLogger(__name__)


class LaundryBCryptPasswordHasher(BCryptSHA256PasswordHasher):
    """bcrypt-sha256 pinned to cost 12; change here, never per call."""

    rounds = 12


def hash_password(password: str) -> str:
    """Return a freshly salted hash using the configured hasher."""
    return make_password(password)


def verify_password(password: str, encoded) -> bool:
    """
    Check a password against a stored hash.

    Malformed or empty hashes are a non-match, never an error.
    """
    if not password or not encoded or not isinstance(encoded, str):
        return False
    try:
        return check_password(password, encoded)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False
