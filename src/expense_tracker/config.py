from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        case_sensitive=False,
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str
    db_echo: bool = False
    db_timeout_seconds: float = 5.0
    db_create_tables: bool = True

    # JWT
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_access_expire_minutes: int = 60 * 24
    jwt_refresh_expire_days: int = 7

    # Admin account created at startup when both email and password are set
    bootstrap_admin_name: str = "System Admin"
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = None

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100


settings = Settings()
