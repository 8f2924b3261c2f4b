"""Tests for config module."""

from unittest import mock

from flowvce import config, token_store
from flowvce.generation import DEFAULT_MAX_TOKENS, DEFAULT_MODEL


def _no_keychain():
    return mock.patch.object(token_store, "load", return_value=None)


class TestLoadSettings:
    def test_defaults(self):
        with _no_keychain():
            settings = config.load_settings({}, env={})
        assert settings.anthropic_api_key == ""
        assert settings.walrus_network == "testnet"
        assert settings.model == DEFAULT_MODEL
        assert settings.max_tokens == DEFAULT_MAX_TOKENS

    def test_environment(self):
        env = {
            "ANTHROPIC_API_KEY": "sk-ant-api-env",
            "GITHUB_TOKEN": "ghp_env",
            "WALRUS_NETWORK": "mainnet",
            "FLOWVCE_MAX_TOKENS": "4000",
        }
        with _no_keychain():
            settings = config.load_settings({}, env=env)
        assert settings.anthropic_api_key == "sk-ant-api-env"
        assert settings.github_token == "ghp_env"
        assert settings.walrus_network == "mainnet"
        assert settings.max_tokens == 4000

    def test_keychain_beats_environment(self):
        stored = {config.GITHUB_KEY: "ghp_keychain"}
        with mock.patch.object(token_store, "load", side_effect=stored.get):
            settings = config.load_settings({}, env={"GITHUB_TOKEN": "ghp_env"})
        assert settings.github_token == "ghp_keychain"

    def test_query_beats_keychain(self):
        with mock.patch.object(token_store, "load", return_value="from-keychain"):
            settings = config.load_settings({"token": " ghp_query "}, env={})
        assert settings.github_token == "ghp_query"
        assert settings.anthropic_api_key == "from-keychain"

    def test_bad_max_tokens_falls_back(self):
        with _no_keychain():
            settings = config.load_settings({}, env={"FLOWVCE_MAX_TOKENS": "lots"})
        assert settings.max_tokens == DEFAULT_MAX_TOKENS


class TestRememberSecrets:
    def test_saves_non_empty(self):
        settings = config.Settings(anthropic_api_key="k", github_token="t")
        with mock.patch.object(token_store, "save") as save, \
             mock.patch.object(token_store, "load", return_value=None):
            config.remember_secrets(settings, remember=True)
        save.assert_any_call(config.ANTHROPIC_KEY, "k")
        save.assert_any_call(config.GITHUB_KEY, "t")
        assert save.call_count == 2

    def test_forget_deletes_saved(self):
        settings = config.Settings(anthropic_api_key="k")
        with mock.patch.object(token_store, "delete") as delete, \
             mock.patch.object(token_store, "load", return_value="old"):
            config.remember_secrets(settings, remember=False)
        assert delete.call_count == len(token_store.SECRET_KEYS)
