from datetime import datetime, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

FCM_MULTICAST_LIMIT = 500


class Settings(BaseSettings):
    firebase_key: str | None = None
    firebase_app_name: str = "expiry-alerts"
    alert_timezone: str | None = None
    products_collection: str = "products"
    active_status: str = "ACTIVE"
    token_collection_group: str = "tokens"
    notification_title: str = "Expiry Summary"
    notification_link: str | None = None
    push_batch_size: int = Field(default=FCM_MULTICAST_LIMIT, ge=1, le=FCM_MULTICAST_LIMIT)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def local_timezone() -> tzinfo:
    return datetime.now().astimezone().tzinfo


def resolve_alert_timezone(name: str | None) -> tzinfo:
    """Named zone when configured, otherwise the process-local zone."""
    raw_name = (name or "").strip()
    if not raw_name:
        return local_timezone()
    try:
        return ZoneInfo(raw_name)
    except Exception:
        return local_timezone()
