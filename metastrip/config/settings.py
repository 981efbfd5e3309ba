from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    remote_provider: str = "http"
    remote_base_url: str = "http://localhost:8080/api/images"
    remote_timeout_seconds: int = 30

    session_store_backend: str = "file"
    session_file_path: str = ".metastrip/session.json"
    session_slot_key: str = "currentImage"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "metastrip"
    db_username: str = "metastrip"
    db_password: str = "secret"
    db_pool_max_size: int = 4
    db_connect_timeout_seconds: float = 10.0

    download_dir: str = "downloads"
    max_upload_size_bytes: int = 10 * 1024 * 1024

    inspect_rate_limit_max_requests: int = 10
    inspect_rate_limit_window_seconds: int = 60
    strip_rate_limit_max_requests: int = 5
    strip_rate_limit_window_seconds: int = 60

    google_drive_access_token: str = ""
    picker_timeout_seconds: int = 30
