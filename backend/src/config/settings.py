"""
Application settings configuration for eventdash.

Centralized settings loaded from environment variables (and ``.env``).
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variables:
        EVENTDASH_INCOME_CATEGORY_NAME: Name of the budget category that
            collects sponsor income when no category is chosen (default: "Income").
            Lookup is case-insensitive and matches any category containing it.
        EVENTDASH_INCOME_CATEGORY_COLOR: Hex color used when the income
            category is created lazily (default: "#10B981")
        EVENTDASH_INCOME_CATEGORY_ICON: Icon identifier for the lazily created
            income category (default: "wallet")
        EVENTDASH_CORS_ORIGINS: Comma-separated list of allowed CORS origins
            (default: "http://localhost:3000")
    """

    income_category_name: str = Field(
        default="Income",
        validation_alias="EVENTDASH_INCOME_CATEGORY_NAME",
        min_length=2,
        max_length=100,
    )

    income_category_color: str = Field(
        default="#10B981",
        validation_alias="EVENTDASH_INCOME_CATEGORY_COLOR",
    )

    income_category_icon: str = Field(
        default="wallet",
        validation_alias="EVENTDASH_INCOME_CATEGORY_ICON",
    )

    cors_origins: str = Field(
        default="http://localhost:3000",
        validation_alias="EVENTDASH_CORS_ORIGINS",
        description="Comma-separated list of origins allowed by the CORS middleware"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("income_category_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """Require a #RRGGBB hex color."""
        if len(v) != 7 or not v.startswith("#"):
            raise ValueError("EVENTDASH_INCOME_CATEGORY_COLOR must be a #RRGGBB hex color")
        int(v[1:], 16)
        return v.upper()

    @property
    def cors_origins_list(self) -> List[str]:
        """Get the configured CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings instance.

    Returns:
        AppSettings: Configured application settings from environment
    """
    return AppSettings()
