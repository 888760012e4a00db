"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "sentinel-decision-engine"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000

    # Request pipeline
    request_timeout_seconds: float = 5.0
    provider_timeout_seconds: float = 2.0

    # Scoring providers
    heuristic_provider_enabled: bool = True
    local_model_enabled: bool = False
    local_model_path: str | None = None
    local_model_version: str = "unknown"
    remote_endpoint_url: str | None = None
    remote_endpoint_api_key: str | None = None

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
