from typing import Optional

from pydantic import BaseModel

from pot_api.settings import Settings

PRIMARY_PROVIDER = "anthropic"
PROVIDERS = ("anthropic", "xai", "deepseek", "moonshot")


class ApiKeys(BaseModel):
    anthropic: Optional[str] = None
    xai: Optional[str] = None
    deepseek: Optional[str] = None
    moonshot: Optional[str] = None


def resolve_keys(override: Optional[ApiKeys], settings: Settings) -> ApiKeys:
    """Per provider, a key sent with the request wins over the configured one."""
    resolved = {}
    for provider in PROVIDERS:
        value = getattr(override, provider) if override else None
        if value is None:
            value = getattr(settings, f"{provider}_api_key")
        resolved[provider] = value
    return ApiKeys(**resolved)


def build_api_key_record(keys: ApiKeys) -> dict[str, str]:
    return {provider: value for provider, value in keys.model_dump().items() if value}


def validate_config(keys: ApiKeys) -> Optional[str]:
    if not getattr(keys, PRIMARY_PROVIDER):
        return "ANTHROPIC_API_KEY is required."
    return None
