from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "CampusDesk"
    environment: str = "development"  # development, production

    database_url: str = "sqlite:///./campusdesk.db"

    log_level: str = "INFO"
    log_dir: str = ""  # empty → console only

    # Comma-separated: "http://a.example,http://b.example"
    cors_origins: str = "http://localhost:3000"

    rate_limit_enabled: bool = True
    bulk_attendance_rate_limit: str = "30/minute"

    default_page_size: int = 50
    max_page_size: int = 500

    seed_demo_data: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def cors_origin_list(self) -> list[str]:
        return [s.strip() for s in self.cors_origins.split(",") if s.strip()]


settings = Settings()
