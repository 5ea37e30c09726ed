from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration, read from the environment or a .env file.

    Unknown environment variables are ignored, so unrelated keys in a shared
    .env do not break startup.
    """

    # ------------------------------------------------------------------
    # App identity
    # ------------------------------------------------------------------
    APP_NAME: str = "Kundli API"
    APP_VERSION: str = "1.0.0"

    # ------------------------------------------------------------------
    # Ephemeris
    # ------------------------------------------------------------------
    # Directory holding Swiss Ephemeris .se1 files. When it is missing or
    # empty the built-in Moshier ephemeris is used.
    EPHE_PATH: str | None = None

    # Swiss Ephemeris sidereal mode id (1 = Lahiri / Chitrapaksha)
    SIDEREAL_MODE: int = 1

    # Rahu from the "mean" or "true" lunar node
    NODE_TYPE: str = "mean"

    # Birth times without an explicit zone are read in this zone
    DEFAULT_TIMEZONE: str = "UTC"

    # ------------------------------------------------------------------
    # HTTP / logging
    # ------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
