"""Credential hashing with Argon2id.

The capture UI hands the service an opaque credential secret (password,
biometric template digest, platform credential id).  Only its hash is ever
stored or compared.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()


def hash_secret(secret: str) -> str:
    return _hasher.hash(secret)


def verify_secret(secret: str, hash_value: str) -> bool:
    try:
        return _hasher.verify(hash_value, secret)
    except (VerificationError, InvalidHashError):
        return False
