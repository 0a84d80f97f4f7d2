"""
Vault Crypto Core - Key derivation, envelope encryption and record storage form.

Each secret is sealed independently:
    salt (32B random) → PBKDF2-HMAC-SHA256(master_key, salt) → record key
    iv (16B random) → AES-256-GCM(record key) → ciphertext + tag (16B)

The four parts travel together as an ``EncryptedRecord`` of base64 strings.
Callers own storage; ``EncryptedRecord.to_json()`` gives a single text value.

Security Note:
    Never log plaintext, ciphertext or key material.
    Every decryption failure raises the same DecryptionError so callers
    (and attackers) cannot tell a wrong key from a tampered record.
"""
import os
import logging
from collections.abc import Mapping
from typing import Optional, Union

import orjson
from pydantic import BaseModel
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import resolve_master_key
from .exceptions import DecryptionError, EncryptionError
from .kdf import SALT_LENGTH, b64decode, b64encode, generate_salt, pbkdf2

logger = logging.getLogger("secret_vault")

IV_LENGTH = 16  # 128-bit IV
TAG_LENGTH = 16  # GCM authentication tag


class EncryptedRecord(BaseModel):
    """Base64-encoded parts of one encrypted secret.

    Records are immutable: updating a secret means encrypting a new record.
    """

    encrypted: str
    iv: str
    tag: str
    salt: str

    model_config = {"frozen": True}

    def to_json(self) -> str:
        """Serialize the record for storage in a single text column."""
        return orjson.dumps(self.model_dump()).decode("utf-8")

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "EncryptedRecord":
        """Load a record produced by ``to_json``.

        Raises:
            DecryptionError: If the stored value is not a valid record.
        """
        try:
            return cls.model_validate(orjson.loads(data))
        except Exception:
            raise DecryptionError() from None


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(master_key: bytes, salt: bytes) -> bytes:
    """Derive a 32-byte record key using PBKDF2-HMAC-SHA256.

    Args:
        master_key: Raw 32-byte master key.
        salt: Per-record random salt.

    Returns:
        32-byte derived key.
    """
    return pbkdf2(master_key, salt)


# ---------------------------------------------------------------------------
# Envelope encryption
# ---------------------------------------------------------------------------

def encrypt_secret(
    plaintext: str, master_key: Optional[bytes] = None,
) -> EncryptedRecord:
    """Encrypt a secret with AES-256-GCM under a freshly salted record key.

    Args:
        plaintext: Secret to encrypt.
        master_key: Raw 32-byte master key; resolved from configuration
            when omitted.

    Returns:
        EncryptedRecord with base64 ``encrypted``, ``iv``, ``tag``, ``salt``.

    Raises:
        ConfigurationError: If the configured master key is malformed.
        EncryptionError: If encryption fails for any other reason.
    """
    if master_key is None:
        master_key = resolve_master_key()
    try:
        salt = generate_salt()
        iv = os.urandom(IV_LENGTH)
        key = derive_key(master_key, salt)
        sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    except Exception as err:
        logger.error("Encryption failed: %s", type(err).__name__)
        raise EncryptionError() from None
    # cryptography appends the tag to the ciphertext
    return EncryptedRecord(
        encrypted=b64encode(sealed[:-TAG_LENGTH]),
        iv=b64encode(iv),
        tag=b64encode(sealed[-TAG_LENGTH:]),
        salt=b64encode(salt),
    )


def decrypt_secret(
    record: Union[EncryptedRecord, Mapping],
    master_key: Optional[bytes] = None,
) -> str:
    """Decrypt a record produced by ``encrypt_secret``.

    Args:
        record: EncryptedRecord, or a mapping with the same four keys.
        master_key: Raw 32-byte master key; resolved from configuration
            when omitted. Must be the key used at encryption time.

    Returns:
        Decrypted plaintext.

    Raises:
        ConfigurationError: If the configured master key is malformed.
        DecryptionError: On any failure; the cause is never disclosed.
    """
    if master_key is None:
        master_key = resolve_master_key()
    try:
        if not isinstance(record, EncryptedRecord):
            record = EncryptedRecord.model_validate(dict(record))
        encrypted = b64decode(record.encrypted)
        iv = b64decode(record.iv, IV_LENGTH)
        tag = b64decode(record.tag, TAG_LENGTH)
        salt = b64decode(record.salt, SALT_LENGTH)
        key = derive_key(master_key, salt)
        plaintext = AESGCM(key).decrypt(iv, encrypted + tag, None)
        return plaintext.decode("utf-8")
    except Exception as err:
        # InvalidTag, binascii.Error, ValidationError, UnicodeDecodeError
        logger.debug("Decryption failed: %s", type(err).__name__)
        raise DecryptionError() from None
