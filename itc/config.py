from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ITC_API__",
        env_file=".env",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8547
    title: str = "PharmaComparer API"
    version: str = "1.0.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ITC_", env_file=".env", extra="ignore")

    default_language: str = "es"
    log_level: str = "INFO"
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5928", "http://localhost:5173"]
    )

    api: ApiConfig = ApiConfig()


settings = Settings()
