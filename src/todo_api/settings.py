from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

_BACKENDS = {"memory", "sqlite", "supabase"}
_ID_POLICIES = {"core", "backend"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default), 'sqlite' or 'supabase'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - SUPABASE_URL: Supabase project URL (required for the supabase backend)
    - SUPABASE_KEY: Supabase API key (required for the supabase backend)
    - SUPABASE_TABLE: table holding todo rows. Default 'todos'
    - ID_GENERATION: 'core' (default) to persist ids generated by the entity,
      'backend' to let the storage backend assign them on insert
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' allows all.
      Default 'http://localhost:3000'
    - API_PREFIX: path prefix for the todo routes. Default '/api'
    - LOG_LEVEL: logging level name. Default 'INFO'
    """

    persistence_backend: str
    sqlite_db_path: str
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    supabase_table: str
    id_generation: str
    cors_allow_origins: List[str]
    api_prefix: str
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _get_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_choice(value: str, allowed: set, default: str) -> str:
    v = value.strip().lower()
    return v if v in allowed else default


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


def _parse_prefix(value: str) -> str:
    prefix = value.strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings(
        persistence_backend=_parse_choice(_get_env("PERSISTENCE_BACKEND", "memory"), _BACKENDS, "memory"),
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/todos.db").strip(),
        supabase_url=_get_optional_env("SUPABASE_URL"),
        supabase_key=_get_optional_env("SUPABASE_KEY"),
        supabase_table=_get_env("SUPABASE_TABLE", "todos").strip(),
        id_generation=_parse_choice(_get_env("ID_GENERATION", "core"), _ID_POLICIES, "core"),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "http://localhost:3000")),
        api_prefix=_parse_prefix(_get_env("API_PREFIX", "/api")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
