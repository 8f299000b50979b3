"""DBM behavior on sqlite."""

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from propsheet.config.db_url import build_sqlite_url
from propsheet.config.core import Settings
from propsheet.pool.database.dbm import DBM

_INSERT_ORPHAN_SUBMISSION = text(
    """
    INSERT INTO submission (submission_id, event_id, username, first_name, last_name, picks)
    VALUES (:submission_id, :event_id, 'u', 'A', 'B', '[]')
    """
)


@pytest_asyncio.fixture
async def dbm(tmp_path):
    manager = DBM(build_sqlite_url(str(tmp_path / "pool.db")))
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.mark.asyncio
async def test_scalar_returns_first_column(dbm):
    assert await dbm.scalar(text("SELECT COUNT(*) FROM pool_event")) == 0


@pytest.mark.asyncio
async def test_write_requires_params(dbm):
    with pytest.raises(ValueError):
        await dbm.write(text("DELETE FROM pool_event"))


@pytest.mark.asyncio
async def test_raw_strings_refused(dbm):
    with pytest.raises(TypeError):
        await dbm.scalar("SELECT 1")


@pytest.mark.asyncio
async def test_foreign_keys_enforced_on_sqlite(dbm):
    assert dbm.is_sqlite is True
    with pytest.raises(IntegrityError):
        await dbm.write(_INSERT_ORPHAN_SUBMISSION, params={"submission_id": "s1", "event_id": "missing"})


@pytest.mark.asyncio
async def test_from_settings_uses_resolved_url(tmp_path):
    url = build_sqlite_url(str(tmp_path / "fs.db"))
    manager = DBM.from_settings(Settings.model_validate({"database": {"url": url}}))
    try:
        assert manager.url == url
        assert manager.is_sqlite is True
    finally:
        await manager.dispose()
