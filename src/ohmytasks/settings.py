from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

# Load .env once; real environment variables take precedence
load_dotenv()


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - TASKS_API_ENDPOINT: URL of the upstream task-storage API (required for task routes)
    - TASKS_API_KEY: key forwarded to the upstream as x-api-key
    - TASKS_API_TIMEOUT: seconds per upstream call (default 10)
    - CACHE_BACKEND: 'memory' (default), 'sqlite' or 'none'
    - CACHE_DB_PATH: path to the sqlite cache file. Default './data/cache.db'
    - CACHE_TTL_SECONDS: cache freshness window (default 300)
    - DEFAULT_LANGUAGE: transcript language when a request omits it (default 'en')
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - ENABLE_API_KEY_AUTH: 'true' to require an x-api-key header on incoming requests
    - API_KEY: expected inbound key (required when ENABLE_API_KEY_AUTH=true)
    - LOG_LEVEL: root log level (default 'INFO')
    """

    tasks_api_endpoint: str
    tasks_api_key: str
    tasks_api_timeout: float
    cache_backend: str
    cache_db_path: str
    cache_ttl_seconds: float
    default_language: str
    cors_allow_origins: List[str]
    enable_api_key_auth: bool
    api_key: Optional[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("CACHE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite", "none"}:
        # Fallback to memory if unsupported
        backend = "memory"

    enable_api_key_auth = _parse_bool(_get_env("ENABLE_API_KEY_AUTH", "false"), False)

    return Settings(
        tasks_api_endpoint=_get_env("TASKS_API_ENDPOINT", "").strip(),
        tasks_api_key=_get_env("TASKS_API_KEY", "").strip(),
        tasks_api_timeout=_parse_float(_get_env("TASKS_API_TIMEOUT", "10"), 10.0),
        cache_backend=backend,
        cache_db_path=_get_env("CACHE_DB_PATH", "./data/cache.db").strip(),
        cache_ttl_seconds=_parse_float(_get_env("CACHE_TTL_SECONDS", "300"), 300.0),
        default_language=_get_env("DEFAULT_LANGUAGE", "en").strip().lower(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        enable_api_key_auth=enable_api_key_auth,
        api_key=os.getenv("API_KEY") if enable_api_key_auth else None,
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
