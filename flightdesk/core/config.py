from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "FlightDesk API"
    LOG_LEVEL: str = "INFO"
    # Comma-separated origins for CORS. If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    # Either a full SQLAlchemy URL or the discrete DB_* parts below.
    DATABASE_URL: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "flightdesk"
    DB_PASS: str = "flightdesk"
    DB_NAME: str = "flightdesk"
    DB_POOL_TIMEOUT: int = 5       # seconds to wait for a pooled connection
    DB_CONNECT_TIMEOUT: int = 5    # seconds, postgres only
    DB_WAIT_TIMEOUT: int = 60      # wait_for_db.py

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v

    @model_validator(mode="after")
    def assemble_database_url(self):
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+psycopg2://{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASS)}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return self

    REDIS_URL: str = "redis://localhost:6379/0"

    # Mail is optional: with neither SMTP_HOST nor SENDGRID_API_KEY set, confirmations are skipped.
    SMTP_HOST: str = ""
    SMTP_PORT: int = 25
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = "bookings@flightdesk.local"
    SMTP_STARTTLS: bool = False

    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM_EMAIL: str = ""

    MAIL_TIMEOUT_SECONDS: int = 10

    @property
    def mail_enabled(self) -> bool:
        return bool(self.SENDGRID_API_KEY or self.SMTP_HOST)


settings = Settings()
