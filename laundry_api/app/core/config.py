"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables so the service has no dependency on
``pydantic_settings``.  Defaults are provided for all fields.  In a
production deployment you should override these via environment
variables or a dedicated configuration service.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Laundry Order API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database.  Relative paths are resolved against
    # the ``laundry_api`` package directory by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "laundry.db")

    # Request header carrying the caller's customer id.  The value is a
    # plain UUID unless ``identity_secret`` is set, in which case it must
    # be ``<uuid>.<signature>`` as issued by ``manage.py issue-token``.
    customer_id_header: str = os.getenv("CUSTOMER_ID_HEADER", "CustomerId")
    identity_secret: str = os.getenv("IDENTITY_SECRET", "")

    # When true, listings with no rows are reported as 404 instead of
    # ``200 []``.
    empty_list_as_not_found: bool = _env_flag("EMPTY_LIST_AS_NOT_FOUND", "true")

    # Comma-separated origins allowed by the CORS policy; "*" allows any
    # origin and an empty value disables CORS handling.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "5000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()
