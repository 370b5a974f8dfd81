from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    app_name: str = "SSAS Accounts Creation Request"
    app_env: str = "development"
    log_level: str = "INFO"
    submit_url: str | None = None
    submit_timeout: float = 15.0
    backend_url: str = "http://127.0.0.1:8000"

    @field_validator("submit_url", mode="before")
    @classmethod
    def normalize_submit_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().rstrip("/")
        return normalized or None

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
