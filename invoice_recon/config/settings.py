from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    service_base_url: str = "http://localhost:8000"
    service_client: str = "http"
    http_timeout_seconds: float = 5.0

    roster_refresh_interval_seconds: float = 10.0
    status_poll_interval_seconds: float = 3.0

    max_upload_size_bytes: int = 10 * 1024 * 1024
    pdf_engine: str = "pdfplumber"

    export_dir: str = "exports"
    anomaly_matching: str = "attach_all"
    filter_ignored_anomalies: bool = False
