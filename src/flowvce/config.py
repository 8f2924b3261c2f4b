"""Runtime settings resolved from query parameters, the keychain, and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from flowvce import token_store
from flowvce.generation import DEFAULT_MAX_TOKENS, DEFAULT_MODEL
from flowvce.token_store import ANTHROPIC_KEY, GITHUB_KEY, WALRUS_KEY


@dataclass
class Settings:
    anthropic_api_key: str = ""
    github_token: str = ""
    walrus_private_key: str = ""
    walrus_network: str = "testnet"
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS


def _resolve(
    query: Mapping[str, str],
    env: Mapping[str, str],
    query_key: str,
    env_key: str,
    secret_key: str | None = None,
    default: str = "",
) -> str:
    """First non-empty value of: query parameter, keychain, environment, default."""
    value = (query.get(query_key) or "").strip()
    if value:
        return value
    if secret_key:
        stored = token_store.load(secret_key)
        if stored:
            return stored
    return (env.get(env_key) or "").strip() or default


def load_settings(
    query: Mapping[str, str] | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    query = query or {}
    env = os.environ if env is None else env

    max_tokens_raw = _resolve(query, env, "max_tokens", "FLOWVCE_MAX_TOKENS")
    try:
        max_tokens = int(max_tokens_raw) if max_tokens_raw else DEFAULT_MAX_TOKENS
    except ValueError:
        max_tokens = DEFAULT_MAX_TOKENS

    return Settings(
        anthropic_api_key=_resolve(query, env, "api_key", "ANTHROPIC_API_KEY", ANTHROPIC_KEY),
        github_token=_resolve(query, env, "token", "GITHUB_TOKEN", GITHUB_KEY),
        walrus_private_key=_resolve(query, env, "wallet_key", "WALRUS_PRIVATE_KEY", WALRUS_KEY),
        walrus_network=_resolve(query, env, "network", "WALRUS_NETWORK", default="testnet"),
        model=_resolve(query, env, "model", "FLOWVCE_MODEL", default=DEFAULT_MODEL),
        max_tokens=max_tokens,
    )


def remember_secrets(settings: Settings, remember: bool) -> None:
    """Persist the secrets of *settings* in the keychain, or clear them."""
    if not remember:
        token_store.forget_secrets()
        return
    token_store.store_secrets({
        ANTHROPIC_KEY: settings.anthropic_api_key,
        GITHUB_KEY: settings.github_token,
        WALRUS_KEY: settings.walrus_private_key,
    })
