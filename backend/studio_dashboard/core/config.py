from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    app_name: str = "Studio Dashboard"
    app_version: str = "0.1.0"
    environment: str = "dev"
    cors_origins: list[str] = ["http://localhost:3000", "http://frontend:3000"]
    data_dir: Path = BASE_DIR / "data" / "exports"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    activity_max_events: int = 50

    model_config = SettingsConfigDict(
        env_prefix="STUDIO_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
