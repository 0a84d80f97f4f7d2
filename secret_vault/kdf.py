"""
Vault KDF - Shared PBKDF2 derivation, salts and strict base64 handling.
"""
import os
import base64
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

KEY_LENGTH = 32  # AES-256
SALT_LENGTH = 32  # 256-bit salt, per record and per hash
ITERATIONS = 100_000  # shared by every derivation


def generate_salt(length: int = SALT_LENGTH) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def pbkdf2(
    secret: bytes,
    salt: bytes,
    algorithm: Optional[hashes.HashAlgorithm] = None,
    length: int = KEY_LENGTH,
) -> bytes:
    """Derive ``length`` bytes with PBKDF2-HMAC (SHA-256 by default)."""
    kdf = PBKDF2HMAC(
        algorithm=algorithm or hashes.SHA256(),
        length=length,
        salt=salt,
        iterations=ITERATIONS,
    )
    return kdf.derive(secret)


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64decode(value: str, length: Optional[int] = None) -> bytes:
    """Decode canonical base64, optionally checking the decoded length.

    Text that decodes but does not re-encode to itself (non-zero unused bits
    in the last character) is rejected, so one byte string has one encoding.

    Raises:
        ValueError: On non-canonical text or an unexpected length.
        binascii.Error: On invalid base64.
        TypeError: If value is not str or bytes.
    """
    raw = base64.b64decode(value, validate=True)
    if isinstance(value, bytes):
        value = value.decode("ascii")
    if b64encode(raw) != value:
        raise ValueError("non-canonical base64")
    if length is not None and len(raw) != length:
        raise ValueError("unexpected decoded length")
    return raw
