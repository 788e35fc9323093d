from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache


class Settings(BaseSettings):
    """Application configuration settings."""

    # Application
    APP_NAME: str = "CSV Insights"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Ingestion
    MAX_ROWS: int = 10_000  # Hard cap on rows retained and analyzed
    INGEST_CHUNK_ROWS: int = 2_000  # Rows per streamed batch
    MAX_UPLOAD_SIZE_MB: int = 200
    CSV_EXTENSIONS: List[str] = [".csv"]
    CSV_DELIMITER: str = ","
    CSV_ENCODINGS: List[str] = ["utf-8-sig", "cp1252"]
    ENCODING_SAMPLE_BYTES: int = 8192

    # Profiling
    NUMERIC_RATIO_THRESHOLD: float = 0.8
    NUMERIC_SAMPLE_SIZE: int = 5_000
    HISTOGRAM_BINS: int = 12
    CATEGORICAL_TOP_N: int = 20

    # Charts
    MAX_CHARTS: int = 10
    CORRELATION_MAX_COLUMNS: int = 10
    CORRELATION_MIN_PAIRS: int = 5
    PIVOT_MAX_LABELS: int = 25
    SCATTER_MAX_POINTS: int = 2_000

    # UI pagination only; not used by the analysis core
    PREVIEW_CHUNK: int = 200

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
