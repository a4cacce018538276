"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    atrium_base_url: str = "https://awrgmu.atriumcampus.com/activity/mix"
    atrium_username: str
    atrium_password: str
    atrium_timeout_seconds: float = 10.0
    supabase_url: str
    supabase_service_key: str
    alumni_member_ids: str | None = None
    duplicate_swipe_code: str = "DENY902"
    identity_name_element_id: str = "person_name"
    identity_member_id_class: str = "campus_id"
    extraction_failure_policy: str = "deny"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_member_ids(raw: str | None) -> frozenset[int]:
    """Parse a comma-separated list of membership ids from env."""
    if raw is None:
        return frozenset()
    ids: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        if value.isdigit():
            ids.add(int(value))
    return frozenset(ids)
