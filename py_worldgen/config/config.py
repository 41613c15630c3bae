from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="*", description="CORS allowed origins (comma separated)")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Map Generation Configuration
    default_map_width: int = Field(default=1200, description="Default map width in cells")
    default_map_height: int = Field(default=800, description="Default map height in cells")
    default_country_count: int = Field(default=40, description="Default number of regions")
    max_map_width: int = Field(default=2000, description="Max allowed map width")
    max_map_height: int = Field(default=2000, description="Max allowed map height")
    max_country_count: int = Field(default=500, description="Max allowed number of regions")

    # Worker Configuration
    generation_workers: int = Field(default=1, description="Worker processes/threads for generation")
    executor_kind: str = Field(default="process", description="Executor type: process or thread")
    job_history_limit: int = Field(default=100, description="Settled jobs remembered for status queries")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
