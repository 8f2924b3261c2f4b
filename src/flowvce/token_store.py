"""Keychain storage for the secrets Flow VCE can remember between sessions.

Three entries are kept under a single keychain service: the Anthropic API
key, the GitHub token and the Walrus wallet key. Every helper degrades to a
no-op when no usable keyring backend exists (headless Linux, containers).
"""

from __future__ import annotations

import logging
from typing import Mapping

logger = logging.getLogger(__name__)

SERVICE_NAME = "FlowVCE"

# Keychain entry names
ANTHROPIC_KEY = "anthropic_api_key"
GITHUB_KEY = "github_token"
WALRUS_KEY = "walrus_private_key"

SECRET_KEYS = (ANTHROPIC_KEY, GITHUB_KEY, WALRUS_KEY)

_AVAILABLE = False

try:
    import keyring
    from keyring.backends import fail
except ImportError:
    logger.warning("keyring not installed; secrets will not be remembered")
else:
    _AVAILABLE = not isinstance(keyring.get_keyring(), fail.Keyring)
    if not _AVAILABLE:
        logger.warning("No keyring backend found; secrets will not be remembered")


def _check_key(key: str) -> None:
    if key not in SECRET_KEYS:
        raise ValueError(f"Unknown secret name: {key!r}")


def is_available() -> bool:
    """Return True if the OS keychain is usable."""
    return _AVAILABLE


def load(key: str) -> str | None:
    """Load one secret. Returns None when missing or on failure."""
    _check_key(key)
    if not _AVAILABLE:
        return None
    try:
        return keyring.get_password(SERVICE_NAME, key)
    except Exception:
        logger.warning("Failed to read %s from keyring", key)
        return None


def save(key: str, value: str) -> bool:
    """Save one secret. Empty values are never stored."""
    _check_key(key)
    if not _AVAILABLE or not value:
        return False
    try:
        keyring.set_password(SERVICE_NAME, key, value)
        return True
    except Exception:
        logger.warning("Failed to save %s to keyring", key)
        return False


def delete(key: str) -> bool:
    _check_key(key)
    if not _AVAILABLE:
        return False
    try:
        keyring.delete_password(SERVICE_NAME, key)
        return True
    except Exception:
        logger.warning("Failed to delete %s from keyring", key)
        return False


def has_secrets() -> bool:
    """True when at least one of the app's secrets is stored."""
    return any(load(key) for key in SECRET_KEYS)


def store_secrets(values: Mapping[str, str]) -> None:
    """Save every non-empty value in *values*, keyed by secret name."""
    for key, value in values.items():
        if value:
            save(key, value)


def forget_secrets() -> None:
    """Remove every stored secret of the app."""
    for key in SECRET_KEYS:
        if load(key):
            delete(key)
