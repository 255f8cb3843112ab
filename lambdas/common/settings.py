# lambdas/common/settings.py
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Manages env vars for both handlers using Pydantic BaseSettings.
    A local .env file is read automatically when present.
    """
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    aws_region: str = Field("us-east-1", alias='AWS_REGION')

    # Sales table
    sales_table_name: str = Field("SalesTable", alias='SALES_TABLE_NAME')
    sales_index_name: str = Field("SortByTimestamp", alias='SALES_INDEX_NAME')

    # Audit generation
    bedrock_model_id: str = Field("amazon.nova-micro-v1:0", alias='BEDROCK_MODEL_ID')
    audit_max_tokens: int = Field(2500, alias='AUDIT_MAX_TOKENS')
    audit_temperature: float = Field(0.7, alias='AUDIT_TEMPERATURE')

    # Email delivery
    sender_email: str = Field("audits@cyrnelorigin.online", alias='SENDER_EMAIL')
    brand_name: str = Field("Cyrnel Origin", alias='BRAND_NAME')

    default_currency: str = Field("ZAR", alias='DEFAULT_CURRENCY')

    # Dashboard
    dashboard_secret_key: Optional[str] = Field(None, alias='DASHBOARD_SECRET_KEY')
    dashboard_limit: int = Field(50, alias='DASHBOARD_LIMIT')
    display_timezone: str = Field("UTC", alias='DISPLAY_TIMEZONE')

    allowed_origin: str = Field("*", alias='ALLOWED_ORIGIN')

    @field_validator('display_timezone')
    @classmethod
    def known_timezone(cls, value: str) -> str:
        # A bad zone fails the cold start instead of every dashboard request
        if value.upper() == "UTC":
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown DISPLAY_TIMEZONE: {value!r}") from e
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Returns the process-wide settings, loaded once on first use."""
    return AppSettings()
