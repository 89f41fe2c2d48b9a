from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    app_name: str = "club-schedule"
    app_env: str = "dev"

    log_level: str = "INFO"

    default_radius_m: int = 200
    min_radius_m: int = 50
    max_radius_m: int = 1000
    radius_step_m: int = 50

    check_in_grace_minutes: int = 15
    late_window_minutes: int = 30

    history_merge_window_ms: int = 1000

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def log_level_resolved(self) -> str:
        level = (self.log_level or "").strip().upper()
        return level or "INFO"


settings = Settings()
