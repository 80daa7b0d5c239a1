from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix="APP_",
    )

    SECRET_KEY: str
    WORKERS: int = 1
    PORT: int = 8000
    DEBUG: bool = False
    CORS_ORIGINS: list[str] | str = []
    APP_VERSION: str = "1.0"
    SLOW_REQUEST_MS: float = 1000

    DATABASE_URL: str
    DATABASE_URL_SYNC: str | None = None
    SQL_LOG_FILE: str | None = "logs/sql.log"

    # Tokens are issued by the external identity provider (Supabase auth).
    AUTH_JWT_SECRET: str
    AUTH_JWT_AUDIENCE: str = "authenticated"
    AUTH_JWT_ALGORITHM: str = "HS256"

    DISCORD_ERROR_WEBHOOK: str | None = None

    # Reporting windows are computed on UTC calendar boundaries.
    REPORT_TIMEZONE: str = "UTC"
    EVENTS_ENDING_SOON_DAYS: int = 7
    TRENDS_MONTHS: int = 12

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [
                origin.strip()
                for origin in self.CORS_ORIGINS.split(",")
                if origin.strip()
            ]
        return self.CORS_ORIGINS


settings = AppConfig()
