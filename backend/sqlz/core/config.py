"""
Runtime settings for sqlz, read from the environment (and an optional .env file).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Seconds to wait when opening a connection in sqlz.core.driver.connect.
    SQLZ_CONNECT_TIMEOUT: int = Field(default=10, ge=1)
    # Server-side statement timeout (seconds) used when the Context has no deadline.
    # None or 0 disables it.
    SQLZ_STATEMENT_TIMEOUT: float | None = None


settings = Settings()  # type: ignore
