from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "docscan"
    db_username: str = "docscan"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: float = 30.0

    worker_poll_interval_seconds: int = 10
    files_root: str = "."

    pdf_engine: str = "pdfplumber"

    ocr_lang: str = "eng"
    tesseract_cmd: str | None = None
    ocr_timeout_seconds: int = 60
