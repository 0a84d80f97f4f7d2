"""Shared fixtures for secret vault tests."""
import pytest

from secret_vault.config import clear_master_key_cache

_KEY_A = "a1" * 32
_KEY_B = "b2" * 32


@pytest.fixture
def key_a():
    """Hex master key configured for every test."""
    return _KEY_A


@pytest.fixture
def key_b():
    """A second, different hex master key."""
    return _KEY_B


@pytest.fixture
def hmac_secret():
    return "test-hmac-secret"


@pytest.fixture(autouse=True)
def vault_env(monkeypatch):
    """Run every test with a known master key and an empty key cache."""
    monkeypatch.setenv("ENCRYPTION_KEY", _KEY_A)
    monkeypatch.delenv("HMAC_SECRET", raising=False)
    monkeypatch.delenv("CONFIRMATION_TOKEN_TTL", raising=False)
    clear_master_key_cache()
    yield
    clear_master_key_cache()


@pytest.fixture
def no_master_key(monkeypatch):
    """Remove ENCRYPTION_KEY so the development fallback is used."""
    monkeypatch.delenv("ENCRYPTION_KEY", raising=False)
