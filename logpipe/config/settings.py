from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    parser_upload_url: str = "http://localhost:1000/upload"
    parser_max_file_size_bytes: int = 300 * 1024 * 1024
    parser_allowed_extensions: list[str] = [".log", ".txt"]

    detector_base_url: str = "http://localhost:1000"
    detector_max_file_size_bytes: int = 5 * 1024 * 1024
    detector_allowed_extensions: list[str] = [".csv", ".xls", ".xlsx"]
    detector_empty_payload_sentinel: str = "emptyCSV"

    generator_url: str = "http://localhost:1000/generate"
    generator_out_of_band_threshold: int = 100_000

    retry_max_retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_backoff_multiplier: float = 2.0

    http_timeout_seconds: int = 30

    artifact_platform: str = "local"
    artifact_dir: str = ""
