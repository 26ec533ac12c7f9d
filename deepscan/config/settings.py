from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8080
    ping_message: str = "ping"

    sightengine_user: str = ""
    sightengine_secret: str = ""
    sightengine_api_url: str = "https://api.sightengine.com/1.0"
    sightengine_image_timeout_seconds: int = 30
    sightengine_video_timeout_seconds: int = 60
    sightengine_test_timeout_seconds: int = 10
    sightengine_test_image_url: str = (
        "https://sightengine.com/assets/img/examples/example-fac-1000.jpg"
    )

    resemble_api_key: str = ""
    audio_demo_delay_seconds: float = 2.0

    deepfake_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    provider_image_max_bytes: int = 10 * 1024 * 1024

    rate_limit_storage_uri: str = ""

    sightengine_calls_per_minute: int = 20
    sightengine_calls_per_hour: int = 200
    sightengine_calls_per_day: int = 2000
    resemble_calls_per_minute: int = 10
    resemble_calls_per_hour: int = 100
    resemble_calls_per_day: int = 1000

    general_rate_limit: int = 100
    general_rate_window_seconds: int = 15 * 60
    analysis_rate_limit: int = 20
    analysis_rate_window_seconds: int = 15 * 60
    upload_rate_limit: int = 10
    upload_rate_window_seconds: int = 15 * 60
    status_rate_limit: int = 200
    status_rate_window_seconds: int = 5 * 60

    cors_allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8080",
    ]
    block_suspicious_user_agents: bool = True

    @property
    def sightengine_configured(self) -> bool:
        return bool(self.sightengine_user and self.sightengine_secret)

    @property
    def resemble_configured(self) -> bool:
        return bool(self.resemble_api_key)
