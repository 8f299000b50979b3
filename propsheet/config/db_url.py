from __future__ import annotations

import os
from typing import Any


def build_database_url(
    *,
    user: str,
    password: str | None,
    host: str,
    port: str,
    name: str,
) -> str:
    auth = f"{user}:{password}" if password else f"{user}"
    return f"postgresql+asyncpg://{auth}@{host}:{port}/{name}"


def build_sqlite_url(path: str) -> str:
    return f"sqlite+aiosqlite:///{os.path.abspath(path)}"


def ensure_env_database_url() -> dict[str, Any]:
    """Compose PROPSHEET_DATABASE__URL from its parts when it is not set."""
    existing_url = os.getenv("PROPSHEET_DATABASE__URL") or os.getenv("DATABASE_URL")
    if existing_url:
        os.environ.setdefault("PROPSHEET_DATABASE__URL", existing_url)
        return {"composed": False, "url_already_set": True}

    user = os.getenv("PROPSHEET_DATABASE__USER")
    pwd = os.getenv("PROPSHEET_DATABASE__PASSWORD") or ""
    host = os.getenv("PROPSHEET_DATABASE__HOST") or "127.0.0.1"
    port = os.getenv("PROPSHEET_DATABASE__PORT") or "5432"
    name = os.getenv("PROPSHEET_DATABASE__NAME")
    if user and name:
        url = build_database_url(user=user, password=pwd, host=host, port=port, name=name)
        os.environ["PROPSHEET_DATABASE__URL"] = url
        return {"composed": True, "reason": "missing_url", "port": port}

    return {"composed": False, "url_already_set": False}


__all__ = [
    "build_database_url",
    "build_sqlite_url",
    "ensure_env_database_url",
]
