"""Secret Vault - Encryption at rest and verification for sensitive values.

Security Note (Threat Model):
    Records are sealed with keys derived from a single process-wide master
    key. Anyone holding ENCRYPTION_KEY and a stored record can recover the
    plaintext; without ENCRYPTION_KEY a development key derived from a
    public seed is used, which protects nothing beyond casual inspection.
"""
from .version import __version__
from .exceptions import (
    VaultError,
    ConfigurationError,
    EncryptionError,
    DecryptionError,
    HashingError,
)
from .config import (
    VaultConfig,
    resolve_master_key,
    clear_master_key_cache,
    generate_master_key,
)
from .crypto import EncryptedRecord, encrypt_secret, decrypt_secret
from .hashing import hash_secret, verify_hash
from .tokens import (
    ConfirmationPayload,
    mask_secret,
    generate_secure_token,
    create_token_expiration,
    generate_confirmation_token,
    verify_confirmation_token,
)

__all__ = [
    "__version__",
    "VaultError",
    "ConfigurationError",
    "EncryptionError",
    "DecryptionError",
    "HashingError",
    "VaultConfig",
    "resolve_master_key",
    "clear_master_key_cache",
    "generate_master_key",
    "EncryptedRecord",
    "encrypt_secret",
    "decrypt_secret",
    "hash_secret",
    "verify_hash",
    "ConfirmationPayload",
    "mask_secret",
    "generate_secure_token",
    "create_token_expiration",
    "generate_confirmation_token",
    "verify_confirmation_token",
]
