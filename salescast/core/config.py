from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Sales Forecast API"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    postgres_user: str = "salescast"
    postgres_password: str = "salescast"
    postgres_host: str = "postgres"
    postgres_port: int = 5432
    postgres_db: str = "salescast"
    database_url_override: str | None = None

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None
    openai_temperature: float = 0.2
    openai_timeout_seconds: float = 30.0
    openai_probe_timeout_seconds: float = 10.0

    report_default_lookback_months: int = 6
    rate_limit: str = "120/minute"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
