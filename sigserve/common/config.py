"""Configuration management for the serving shim.

This module centralizes environment-driven configuration for the model
serving service and the helper scripts. It builds on
``pydantic_settings.BaseSettings`` so configuration can be provided via
environment variables, ``.env`` files, or defaults.

Highlights
- Strongly‑typed settings with sensible defaults
- One place to discover commonly used environment variables
- Field names map case‑insensitively to environment variables
  (``ml_model_path`` ↔ ``ML_MODEL_PATH``)

Usage
- Inject the appropriate config in your service entrypoint:
  ``config = ModelServingConfig()``
- Or select dynamically: ``config = get_config("model-serving")``
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class shared by the service and scripts.

    Parameters are read from the process environment. Defaults keep local
    development convenient while still being explicit.

    Notes
    - Add new shared settings here so downstream consumers inherit them.
    - Prefer declaring a field over reading ``os.environ`` directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # Environment
    ml_env: str = Field(default="local", description="Deployment environment name")

    # Logging
    ml_log_level: str = Field(default="INFO", description="Log level")
    ml_log_format: str = Field(default="json", description="json or console")

    # Observability
    ml_metrics_enabled: bool = Field(default=True, description="Expose /metrics")


class ModelServingConfig(BaseConfig):
    """Configuration for the model serving service.

    Extends ``BaseConfig`` with the listening address, the model artifact
    location and request limits used by the prediction API.
    """

    ml_model_serving_host: str = Field(default="0.0.0.0")
    ml_model_serving_port: int = Field(default=9005)

    # Model artifact
    ml_model_path: str = Field(default="/app/models/default")
    ml_model_framework: Optional[str] = Field(
        default=None, description="tensorflow or joblib; detected when unset"
    )
    ml_default_signature: str = Field(default="serving_default")

    # Requests
    ml_max_batch_size: int = Field(default=256)
    ml_cors_allow_origins: str = Field(default="*", description="Comma separated origins")

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.ml_cors_allow_origins.split(",") if origin.strip()]


def get_config(service_name: str) -> BaseConfig:
    """Get configuration for a specific service.

    Parameters
    - service_name: ``model-serving`` or any script name.

    Returns
    - A concrete ``BaseConfig`` subclass pre‑wired to read the right env vars.
    """
    config_map = {
        "model-serving": ModelServingConfig,
    }

    # Scripts only need the shared settings.
    config_class = config_map.get(service_name, BaseConfig)
    return config_class()

