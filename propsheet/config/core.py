"""Runtime settings for propsheet processes.

Values resolve in this order (later wins):
1. Field defaults
2. YAML file (``config/propsheet.yaml`` or an explicit path)
3. Environment variables prefixed ``PROPSHEET_`` (nested with ``__``)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .db_url import build_database_url, build_sqlite_url

_SECRET_KEYS = ("password", "secret", "token", "url")


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _data_dir(test_mode: bool = False) -> Path:
    base = _project_root() / ("data-test" if test_mode else "data")
    return base


class DatabaseSettings(BaseModel):
    url: str | None = None
    host: str = "127.0.0.1"
    port: int = 5432
    user: str | None = None
    password: str | None = None
    name: str | None = None
    sqlite_filename: str = "propsheet.db"
    echo: bool = False


class RuntimeSettings(BaseModel):
    test_mode: bool = False
    admin_secret: str | None = None
    admin_token_ttl_seconds: int = Field(default=12 * 3600, ge=60)


class LoggingSettings(BaseModel):
    json_logs: bool = False
    level: str = "INFO"
    events_retention_bytes: int = Field(default=5 * 1024 * 1024, ge=1024)

    @model_validator(mode="before")
    @classmethod
    def _alias_json(cls, data: Any) -> Any:
        if isinstance(data, dict) and "json" in data and "json_logs" not in data:
            data = dict(data)
            data["json_logs"] = data.pop("json")
        return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PROPSHEET_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def resolved_database_url(self) -> str:
        """Explicit URL, else postgres from parts, else a local sqlite file."""
        db = self.database
        if db.url:
            return db.url
        if db.user and db.name:
            return build_database_url(
                user=db.user,
                password=db.password,
                host=db.host,
                port=str(db.port),
                name=db.name,
            )
        data_dir = _data_dir(self.runtime.test_mode)
        data_dir.mkdir(parents=True, exist_ok=True)
        return build_sqlite_url(str(data_dir / db.sqlite_filename))


_last_yaml_path: str | None = None


def last_yaml_path() -> str | None:
    return _last_yaml_path


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return data


def load_settings(yaml_path: str | None = None) -> Settings:
    """Build settings from YAML defaults overlaid with environment variables."""
    global _last_yaml_path
    path = Path(yaml_path) if yaml_path else _project_root() / "config" / "propsheet.yaml"
    file_data = _load_yaml(path)
    _last_yaml_path = str(path) if file_data else None

    env_settings = Settings()
    merged: Dict[str, Any] = {}
    for section, values in file_data.items():
        if isinstance(values, dict):
            merged[section] = dict(values)
    # Environment wins over YAML for every explicitly set field
    for section in ("database", "runtime", "logging"):
        env_section = getattr(env_settings, section)
        explicit = env_section.model_dump(exclude_defaults=True)
        merged.setdefault(section, {}).update(explicit)
    return Settings.model_validate(merged)


def sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Mask secret-looking values before logging a settings dump."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            out[key] = sanitize_dict(value)
        elif value and any(marker in key.lower() for marker in _SECRET_KEYS):
            out[key] = "***"
        else:
            out[key] = value
    return out


__all__ = [
    "DatabaseSettings",
    "RuntimeSettings",
    "LoggingSettings",
    "Settings",
    "load_settings",
    "last_yaml_path",
    "sanitize_dict",
    "_project_root",
    "_data_dir",
]
