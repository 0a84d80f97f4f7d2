"""
Vault Configuration - Master key loading and validated settings.

Reads settings from environment variables:
    ENCRYPTION_KEY = <64 hex characters, 32-byte master key>
    HMAC_SECRET = <secret used to sign confirmation tokens>
    CONFIRMATION_TOKEN_TTL = <seconds, default 30 days>

When ENCRYPTION_KEY is absent a development key is derived from a fixed
seed. Records encrypted under that key are readable only by deployments
sharing the same build, so a warning is always logged.

Security Note:
    Never log key material. Only log whether a key was configured.
"""
import os
import secrets
import logging
import threading
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from .exceptions import ConfigurationError
from .kdf import KEY_LENGTH, pbkdf2

logger = logging.getLogger("secret_vault")

ENCRYPTION_KEY_ENV = "ENCRYPTION_KEY"
HMAC_SECRET_ENV = "HMAC_SECRET"
TOKEN_TTL_ENV = "CONFIRMATION_TOKEN_TTL"

DEFAULT_TOKEN_TTL = 30 * 24 * 60 * 60  # 30 days

_DEV_SEED = b"development-key-seed-do-not-use-in-production"
_DEV_SALT = b"salt"

# raw ENCRYPTION_KEY value (None when unset) -> resolved master key
_key_cache: dict[Optional[str], bytes] = {}
_key_lock = threading.Lock()


def parse_master_key(value: str) -> bytes:
    """Decode a hex-encoded master key.

    Args:
        value: 64 hex characters.

    Returns:
        Raw 32-byte key.

    Raises:
        ConfigurationError: If the value is not hex or does not decode
            to exactly 32 bytes. The value is never echoed back.
    """
    try:
        key_bytes = bytes.fromhex(value.strip())
    except (AttributeError, ValueError):
        raise ConfigurationError(
            f"{ENCRYPTION_KEY_ENV} must be a hex-encoded string "
            f"({KEY_LENGTH * 2} hex characters)"
        ) from None
    if len(key_bytes) != KEY_LENGTH:
        raise ConfigurationError()
    return key_bytes


def derive_development_key() -> bytes:
    """Derive the deterministic development master key.

    Always logs a warning: the key comes from a literal seed compiled into
    this package and must never protect production data.
    """
    logger.warning(
        "%s not found in environment. Using a development-only key derived "
        "from a fixed seed; it is NOT suitable for production.",
        ENCRYPTION_KEY_ENV,
    )
    logger.warning(
        "For production, set %s to a 64-character hex string "
        "(e.g. `openssl rand -hex 32`).",
        ENCRYPTION_KEY_ENV,
    )
    return pbkdf2(_DEV_SEED, _DEV_SALT)


def resolve_master_key() -> bytes:
    """Return the 32-byte master key for this process.

    The key is memoized per distinct ENCRYPTION_KEY value, so concurrent
    first access computes it once and a changed value is re-resolved.

    Returns:
        Raw 32-byte master key.

    Raises:
        ConfigurationError: If ENCRYPTION_KEY is set but malformed.
    """
    raw = os.environ.get(ENCRYPTION_KEY_ENV, "").strip() or None
    key = _key_cache.get(raw)
    if key is not None:
        return key
    with _key_lock:
        key = _key_cache.get(raw)
        if key is None:
            key = VaultConfig(encryption_key=raw).master_key()
            _key_cache[raw] = key
            logger.debug(
                "Resolved master key (configured=%s)", raw is not None,
            )
    return key


def clear_master_key_cache() -> None:
    """Forget every memoized master key."""
    with _key_lock:
        _key_cache.clear()


def generate_master_key() -> str:
    """Generate a random 32-byte master key and return it as hex.

    This is a utility for operators provisioning ENCRYPTION_KEY.

    Returns:
        64-character hex string.
    """
    return secrets.token_hex(KEY_LENGTH)


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    encryption_key: Optional[SecretStr] = None
    hmac_secret: Optional[SecretStr] = None
    confirmation_ttl: int = Field(default=DEFAULT_TOKEN_TTL, ge=60)

    @field_validator("encryption_key", "hmac_secret", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        """Treat empty strings as unset values."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def master_key(self) -> bytes:
        """Return the configured master key, or the development fallback.

        Raises:
            ConfigurationError: If the configured key is malformed.
        """
        if self.encryption_key is None:
            return derive_development_key()
        return parse_master_key(self.encryption_key.get_secret_value())

    def signing_secret(self) -> bytes:
        """Return the HMAC secret used for confirmation tokens.

        Raises:
            ConfigurationError: If HMAC_SECRET is not configured.
        """
        if self.hmac_secret is None:
            raise ConfigurationError(
                f"{HMAC_SECRET_ENV} environment variable is required"
            )
        return self.hmac_secret.get_secret_value().encode("utf-8")

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Returns:
            Populated VaultConfig instance.

        Raises:
            ConfigurationError: If a value fails validation.
        """
        try:
            return cls(
                encryption_key=os.environ.get(ENCRYPTION_KEY_ENV),
                hmac_secret=os.environ.get(HMAC_SECRET_ENV),
                confirmation_ttl=os.environ.get(TOKEN_TTL_ENV, DEFAULT_TOKEN_TTL),
            )
        except ValidationError as err:
            fields = sorted({str(e["loc"][0]) for e in err.errors()})
            raise ConfigurationError(
                f"Invalid vault configuration: {', '.join(fields)}"
            ) from None
