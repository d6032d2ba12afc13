from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..services.llm import LLMSettings
from ..services.upload import DEFAULT_MAX_FILE_SIZE_BYTES

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/assistant.yml``)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults (10 MB upload limit, gpt-3.5-turbo settings)
- Resolve the OpenAI API key from the environment (never from the file)
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "AppConfig",
    "ConfigError",
    "DatabaseConfig",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/assistant.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """PostgreSQL fallback settings; environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None

    def resolve_dsn(self) -> str:
        """Final DSN: DATABASE_URL / PGDSN, else PG* variables over file values."""
        dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or self.dsn
        if dsn:
            return dsn
        host = os.getenv("PGHOST", self.host or "localhost")
        port = os.getenv("PGPORT", str(self.port) if self.port else "5432")
        user = os.getenv("PGUSER", self.user or "postgres")
        password = os.getenv("PGPASSWORD", self.password or "")
        database = os.getenv("PGDATABASE", self.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"
        return dsn


@dataclass(frozen=True)
class AppConfig:
    source_directory: str
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    llm: LLMSettings = field(default_factory=LLMSettings)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    @property
    def openai_api_key(self) -> str | None:
        return os.getenv("OPENAI_API_KEY")


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: if the schema file is missing/invalid or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top-level mapping expected")

    _validate_config_schema(data)

    upload_raw = data.get("upload") or {}
    max_mb = upload_raw.get("max_file_size_mb")
    max_bytes = int(max_mb * 1024 * 1024) if max_mb is not None else DEFAULT_MAX_FILE_SIZE_BYTES

    defaults = LLMSettings()
    llm_raw = data.get("llm") or {}
    llm = LLMSettings(
        model=llm_raw.get("model", defaults.model),
        max_tokens=llm_raw.get("max_tokens", defaults.max_tokens),
        temperature=llm_raw.get("temperature", defaults.temperature),
        timeout_seconds=llm_raw.get("timeout_seconds", defaults.timeout_seconds),
        base_url=llm_raw.get("base_url", defaults.base_url),
    )

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return AppConfig(
        source_directory=data["source_directory"],
        max_file_size_bytes=max_bytes,
        llm=llm,
        database=db,
    )
