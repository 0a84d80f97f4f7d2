"""
Vault Exceptions - Typed failures raised by the secret vault.

Callers match on the exception type, never on the message text.
Messages are fixed and generic; they never carry key material,
plaintext or the reason a decryption failed.
"""
from typing import Optional


class VaultError(Exception):
    """Base exception for all secret vault failures."""

    default_message = "Secret vault operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ConfigurationError(VaultError):
    """Master key or signing secret is missing or malformed."""

    default_message = (
        "Invalid ENCRYPTION_KEY length. Must be 32 bytes (64 hex characters)."
    )


class EncryptionError(VaultError):
    """Raised when a secret could not be encrypted."""

    default_message = "Failed to encrypt secret"


class DecryptionError(VaultError):
    """Raised for any decryption failure.

    Wrong key, tampered tag, corrupted ciphertext and malformed base64
    all produce this same error and message.
    """

    default_message = "Failed to decrypt secret: invalid key or corrupted data"


class HashingError(VaultError):
    """Raised when a one-way hash could not be computed."""

    default_message = "Failed to hash secret"
