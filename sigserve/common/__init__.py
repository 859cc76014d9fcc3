"""Common utilities shared by the service and scripts.

Includes:
- ``config``: Pydantic-based service configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers and decorators.

Import pattern:
- from sigserve.common.config import ModelServingConfig
- from sigserve.common.logging import configure_logging
"""
