import os

import pytest

from propsheet.config import load_settings, sanitize_dict
from propsheet.config.core import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("PROPSHEET_"):
            monkeypatch.delenv(key)


def test_defaults_without_yaml(tmp_path):
    settings = load_settings(str(tmp_path / "absent.yaml"))
    assert settings.logging.level == "INFO"
    assert settings.runtime.admin_token_ttl_seconds == 12 * 3600


def test_yaml_values_and_json_alias(tmp_path):
    path = tmp_path / "propsheet.yaml"
    path.write_text(
        "logging:\n  json: true\n  level: DEBUG\ndatabase:\n  url: sqlite+aiosqlite:///x.db\n",
        encoding="utf-8",
    )
    settings = load_settings(str(path))
    assert settings.logging.json_logs is True
    assert settings.logging.level == "DEBUG"
    assert settings.resolved_database_url() == "sqlite+aiosqlite:///x.db"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "propsheet.yaml"
    path.write_text("logging:\n  level: DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("PROPSHEET_LOGGING__LEVEL", "WARNING")

    assert load_settings(str(path)).logging.level == "WARNING"


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "propsheet.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(str(path))


def test_resolved_url_from_parts():
    settings = Settings.model_validate({"database": {"user": "u", "password": "p", "name": "pool", "port": 6543}})
    assert settings.resolved_database_url() == "postgresql+asyncpg://u:p@127.0.0.1:6543/pool"


def test_sanitize_dict_masks_secrets():
    dumped = sanitize_dict({"database": {"password": "hunter2", "host": "h"}, "runtime": {"admin_secret": "s"}})
    assert dumped["database"] == {"password": "***", "host": "h"}
    assert dumped["runtime"]["admin_secret"] == "***"
