from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding='utf-8', extra='ignore')

    # --- General ---
    PROJECT_NAME: str = "Storefront Catalog Service"
    ENVIRONMENT: str = Field("development", validation_alias="ENV", alias_priority=2)
    LOG_LEVEL: str = "INFO"

    # --- Primary DB ---
    # DATABASE_URL wins; otherwise a PostgreSQL URL is built when DB_HOST is set,
    # and a local SQLite file is used as the last resort.
    DB_DRIVER: str = "postgresql+psycopg2"
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 5432
    DB_NAME: str = "storefront"
    DATABASE_URL: Optional[str] = None
    AUTO_CREATE_TABLES: bool = True

    # --- Session credential (JWT) ---
    JWT_SECRET: str = Field("change-me-in-production", validation_alias="SECRET_KEY")
    JWT_ALGORITHM: str = "HS512"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    SESSION_COOKIE_NAME: str = "admin_session"
    SESSION_COOKIE_SECURE: bool = False

    # --- Bootstrap admin ---
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # --- Message forwarding (Resend) ---
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    MAIL_FROM: str = "onboarding@resend.dev"
    MAIL_TIMEOUT_SECONDS: float = 10.0

    # --- Uploads / import ---
    MAX_UPLOAD_BYTES: int = 4 * 1024 * 1024
    SLUG_CONFLICT_RETRIES: int = 5

    @model_validator(mode='after')
    def _construct_database_url(self) -> 'Settings':
        if self.DATABASE_URL is None:
            if self.DB_HOST:
                self.DATABASE_URL = (
                    f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}"
                    f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
                )
            else:
                self.DATABASE_URL = "sqlite:///./storefront.db"
        return self


# Instantiate
settings = Settings()
