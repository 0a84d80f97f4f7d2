"""
Vault Tokens - Display masking, random tokens and signed confirmation tokens.

Confirmation token format (base64 of JSON):
    {"payload": "<compact JSON ConfirmationPayload>", "signature": "<hex HMAC-SHA256>"}

Security Note:
    Never log token values or the signing secret.
"""
import hmac
import base64
import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import orjson
from pydantic import BaseModel

from .config import VaultConfig
from .exceptions import ConfigurationError

logger = logging.getLogger("secret_vault")

MASK_CHAR = "•"  # bullet
MIN_MASK_LENGTH = 8
DEFAULT_TOKEN_BYTES = 32


# ---------------------------------------------------------------------------
# Masking and random tokens
# ---------------------------------------------------------------------------

def mask_secret(secret: Optional[str], show_last: int = 4) -> str:
    """Mask a secret for display, keeping only its last characters.

    Secrets no longer than ``show_last`` get a fixed placeholder so their
    length is not revealed.

    Args:
        secret: Value to mask.
        show_last: Number of trailing characters left visible.

    Returns:
        Masked value like ``"••••••••1234"``.
    """
    if not secret or len(secret) <= show_last:
        return MASK_CHAR * MIN_MASK_LENGTH
    if show_last <= 0:
        return MASK_CHAR * max(MIN_MASK_LENGTH, len(secret))
    masked_length = max(MIN_MASK_LENGTH, len(secret) - show_last)
    return MASK_CHAR * masked_length + secret[-show_last:]


def generate_secure_token(length_bytes: int = DEFAULT_TOKEN_BYTES) -> str:
    """Generate a random token from the system CSPRNG.

    Args:
        length_bytes: Number of random bytes.

    Returns:
        Hex string of ``2 * length_bytes`` characters.

    Raises:
        ValueError: If length_bytes is less than 1.
    """
    if length_bytes < 1:
        raise ValueError("length_bytes must be a positive integer")
    return secrets.token_hex(length_bytes)


# ---------------------------------------------------------------------------
# Signed confirmation tokens
# ---------------------------------------------------------------------------

class ConfirmationPayload(BaseModel):
    """Signed content of a confirmation token."""

    subject: str
    purpose: str
    expires_at: int  # unix timestamp (seconds)

    @property
    def expires(self) -> datetime:
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc)


def create_token_expiration(ttl: Optional[int] = None) -> datetime:
    """Return the expiry for a new confirmation token.

    Args:
        ttl: Lifetime in seconds; CONFIRMATION_TOKEN_TTL (30 days) if omitted.
    """
    if ttl is None:
        ttl = VaultConfig.from_env().confirmation_ttl
    return datetime.now(timezone.utc) + timedelta(seconds=ttl)


def _signing_secret(secret: Union[str, bytes, None]) -> bytes:
    if secret is None:
        return VaultConfig.from_env().signing_secret()
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if not secret:
        raise ConfigurationError("HMAC secret must not be empty")
    return secret


def _sign(secret: bytes, payload: bytes) -> str:
    return hmac.new(secret, payload, hashlib.sha256).hexdigest()


def generate_confirmation_token(
    subject: str,
    purpose: str,
    expires_at: datetime,
    secret: Union[str, bytes, None] = None,
) -> str:
    """Create an HMAC-signed token confirming an operator action.

    Args:
        subject: Identifier of the thing being confirmed (e.g. a request id).
        purpose: Action the token authorizes (e.g. "confirm_deletion").
        expires_at: Expiration time.
        secret: Signing secret; HMAC_SECRET from the environment if omitted.

    Returns:
        Base64-encoded token.

    Raises:
        ConfigurationError: If no signing secret is available.
    """
    key = _signing_secret(secret)
    payload = ConfirmationPayload(
        subject=subject,
        purpose=purpose,
        expires_at=int(expires_at.timestamp()),
    )
    payload_json = orjson.dumps(payload.model_dump())
    token = orjson.dumps({
        "payload": payload_json.decode("utf-8"),
        "signature": _sign(key, payload_json),
    })
    return base64.b64encode(token).decode("ascii")


def verify_confirmation_token(
    token: str,
    purpose: str,
    secret: Union[str, bytes, None] = None,
) -> Optional[ConfirmationPayload]:
    """Verify a token from ``generate_confirmation_token``.

    Args:
        token: Base64-encoded token.
        purpose: Action the token must have been issued for.
        secret: Signing secret; HMAC_SECRET from the environment if omitted.

    Returns:
        The decoded payload, or None if the token is invalid, tampered,
        issued for another purpose, expired, or no secret is configured.
    """
    try:
        key = _signing_secret(secret)
    except ConfigurationError:
        logger.error("Cannot verify confirmation token: HMAC secret is not configured")
        return None
    try:
        envelope = orjson.loads(base64.b64decode(token, validate=True))
        payload_json = envelope["payload"].encode("utf-8")
        signature = bytes.fromhex(envelope["signature"])
        expected = bytes.fromhex(_sign(key, payload_json))
        if not hmac.compare_digest(signature, expected):
            logger.debug("Confirmation token rejected: bad signature")
            return None
        payload = ConfirmationPayload.model_validate(orjson.loads(payload_json))
    except Exception as err:
        logger.debug("Confirmation token rejected: %s", type(err).__name__)
        return None
    if payload.purpose != purpose:
        logger.debug("Confirmation token rejected: purpose mismatch")
        return None
    if payload.expires_at < int(datetime.now(timezone.utc).timestamp()):
        logger.debug("Confirmation token rejected: expired")
        return None
    return payload
