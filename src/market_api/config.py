"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """HTTP bind address."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080


class DatabaseSettings(BaseSettings):
    """SQLite file location and connection pool sizing.

    The database file must already exist with the ``bot`` and ``ohlc``
    tables provisioned; the service never creates or migrates schema.
    """

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    path: str = ""
    pool_size: int = 8
    acquire_timeout: float = 5.0  # seconds to wait for a free connection
    busy_timeout_ms: int = 5000  # sqlite lock wait per statement


class ApiSettings(BaseSettings):
    """HTTP error mapping behaviour."""

    model_config = SettingsConfigDict(env_prefix="API_")

    # False: every failure is a 500, matching the deployed clients.
    # True: 422 validation, 404 not found, 503 pool exhausted, 500 storage.
    strict_status_codes: bool = False


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    api: ApiSettings = ApiSettings()
