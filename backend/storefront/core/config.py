from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./storefront.db"
    SQL_ECHO: bool = False

    # Store
    STORE_NAME: str = "Storefront"
    TAX_RATE: Decimal = Decimal("0.2")
    MIN_SKUS_PER_PRODUCT: int = 2

    # Logging
    LOG_LEVEL: str = "INFO"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow"
    )


settings = Settings()
