"""
Vault Hashing - Salted one-way hashes and constant-time verification.

Hash record format (base64):
    [salt 32B][PBKDF2-HMAC-SHA512 64B]

Security Note:
    verify_hash() never raises and never says why a check failed.
"""
import hmac
import logging

from cryptography.hazmat.primitives import hashes

from .exceptions import HashingError
from .kdf import SALT_LENGTH, b64decode, b64encode, generate_salt, pbkdf2

logger = logging.getLogger("secret_vault")

HASH_LENGTH = 64  # SHA-512 digest size


def _pbkdf2_sha512(plaintext: str, salt: bytes) -> bytes:
    return pbkdf2(plaintext.encode("utf-8"), salt, hashes.SHA512(), HASH_LENGTH)


def hash_secret(plaintext: str) -> str:
    """Hash a secret for later comparison without storing it.

    Args:
        plaintext: Secret to hash.

    Returns:
        Base64 of salt || hash. A fresh salt makes every call differ.

    Raises:
        HashingError: If the hash could not be computed.
    """
    try:
        salt = generate_salt()
        digest = _pbkdf2_sha512(plaintext, salt)
    except Exception as err:
        logger.error("Hashing failed: %s", type(err).__name__)
        raise HashingError() from None
    return b64encode(salt + digest)


def verify_hash(plaintext: str, hashed_data: str) -> bool:
    """Check a plaintext against a record from ``hash_secret``.

    Args:
        plaintext: Candidate secret.
        hashed_data: Base64 hash record.

    Returns:
        True on match; False on mismatch or any malformed input.
    """
    try:
        combined = b64decode(hashed_data, SALT_LENGTH + HASH_LENGTH)
        salt, expected = combined[:SALT_LENGTH], combined[SALT_LENGTH:]
        digest = _pbkdf2_sha512(plaintext, salt)
        return hmac.compare_digest(digest, expected)
    except Exception as err:
        logger.debug("Hash verification failed: %s", type(err).__name__)
        return False
