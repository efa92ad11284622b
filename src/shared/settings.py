"""Store-wide admin settings.

Loaded once at startup (see ``app.py``) and handed to the components that
need them. Values come from ``BLOM_*`` environment variables or a ``.env``
file next to the process working directory.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdminSettings(BaseSettings):
    store_name: str = "BLOM Cosmetics"
    currency: str = Field("ZAR", min_length=3, max_length=3)
    timezone: str = "Africa/Johannesburg"

    # Stock
    allow_negative_stock: bool = False
    low_stock_threshold: int = Field(5, ge=0)

    # Order status notifications
    order_status_webhook_url: HttpUrl | None = None
    order_status_webhook_timeout: float = Field(5.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="BLOM_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("timezone")
    @classmethod
    def timezone_must_exist(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value


@lru_cache
def load_settings() -> AdminSettings:
    """Read settings from the environment. Cached for the process lifetime."""
    return AdminSettings()
