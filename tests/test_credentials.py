from conftest import make_settings

from pot_api.credentials import ApiKeys, build_api_key_record, resolve_keys, validate_config
from pot_api.settings import Settings


def test_request_override_beats_environment() -> None:
    settings = make_settings(anthropic_api_key="env-anthropic", xai_api_key="env-xai")
    keys = resolve_keys(ApiKeys(anthropic="req-anthropic"), settings)
    assert keys.anthropic == "req-anthropic"
    assert keys.xai == "env-xai"
    assert keys.deepseek is None


def test_environment_used_without_override() -> None:
    settings = make_settings(anthropic_api_key="env-anthropic", moonshot_api_key="env-moonshot")
    keys = resolve_keys(None, settings)
    assert keys == ApiKeys(anthropic="env-anthropic", moonshot="env-moonshot")


def test_settings_read_provider_keys_from_env(monkeypatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "deepseek-env")
    settings = Settings(_env_file=None)
    assert settings.anthropic_api_key == "from-env"
    assert settings.deepseek_api_key == "deepseek-env"


def test_record_only_contains_configured_providers() -> None:
    record = build_api_key_record(ApiKeys(anthropic="a", xai="", deepseek="d"))
    assert record == {"anthropic": "a", "deepseek": "d"}


def test_primary_key_is_mandatory() -> None:
    assert validate_config(ApiKeys(xai="x")) == "ANTHROPIC_API_KEY is required."
    assert validate_config(ApiKeys(anthropic="")) == "ANTHROPIC_API_KEY is required."
    assert validate_config(ApiKeys(anthropic="a")) is None
