from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Order CSV Export"
    VERSION: str = "1.2.1"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    # Database
    DATABASE_URL: str = "sqlite:///./orders.db"

    # Auth
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Integrity tokens for download links (reusable until expiry)
    EXPORT_TOKEN_EXPIRE_MINUTES: int = 1440
    EXPORT_TOKEN_ACTION: str = "download_order_csv"

    # Export policy
    COMPLETED_STATUS: str = "completed"
    MANAGEMENT_CAPABILITY: str = "manage_woocommerce"
    REQUIRE_LINE_ITEMS: bool = False

    # CSV layout
    WHOLESALE_PRICE_META_KEY: str = "wcwp_wholesale"
    BARCODE_META_KEY: str = "_global_unique_id"
    CSV_LINE_TERMINATOR: Literal["\n", "\r\n"] = "\n"

    # Admin flow
    ORDER_LISTING_URL: str = "/admin/orders"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None


settings = Settings()
