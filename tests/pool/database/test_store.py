"""DocumentStore against a throwaway sqlite database."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from propsheet.config.db_url import build_sqlite_url
from propsheet.pool.database.dbm import DBM
from propsheet.pool.database.schema import PoolEvent, PropQuestion
from propsheet.pool.database.store import DocumentStore
from propsheet.pool.models import Pick
from propsheet.pool.scoring.validation import SubmissionDraft
from propsheet.shared.enums import QuestionKind


@pytest_asyncio.fixture
async def store(tmp_path):
    dbm = DBM(build_sqlite_url(str(tmp_path / "pool.db")))
    await dbm.create_all()
    async with dbm.session() as session:
        async with session.begin():
            session.add_all(
                [
                    PoolEvent(
                        event_id="e1",
                        name="Big Game",
                        event_date=datetime(2026, 2, 8, 23, 30),
                        is_active=True,
                        is_locked=False,
                    ),
                    PoolEvent(event_id="e2", name="Old Game", is_active=True, is_locked=True),
                    PoolEvent(
                        event_id="e3",
                        name="Hidden Game",
                        event_date=datetime(2025, 1, 1, 12, 0),
                        is_active=False,
                        is_locked=False,
                    ),
                ]
            )
        async with session.begin():
            session.add_all(
                [
                    PropQuestion(
                        question_id="q2",
                        event_id="e1",
                        question="Who wins?",
                        kind=QuestionKind.MULTIPLE_CHOICE,
                        options=[{"id": "A", "text": "Chiefs"}, {"id": "B", "text": "Eagles"}],
                        display_order=2,
                    ),
                    PropQuestion(
                        question_id="q1",
                        event_id="e1",
                        question="Anthem singer?",
                        kind=QuestionKind.TEXT,
                        display_order=1,
                    ),
                ]
            )
    yield DocumentStore(dbm)
    await dbm.dispose()


def _draft(username, answer="A"):
    return SubmissionDraft(
        username=username,
        first_name="Pat",
        last_name="Lee",
        picks=(Pick(prop_id="q2", answer=answer), Pick(prop_id="q1", answer="Chris Stapleton")),
    )


@pytest.mark.asyncio
async def test_get_event(store):
    event = await store.get_event("e1")
    assert event.name == "Big Game"
    assert event.event_date == datetime(2026, 2, 8, 23, 30)
    assert event.is_locked is False
    assert await store.get_event("missing") is None


@pytest.mark.asyncio
async def test_list_lockable_events_skips_locked(store):
    events = await store.list_lockable_events()
    assert [e.event_id for e in events] == ["e1"]


@pytest.mark.asyncio
async def test_list_events_all_and_active_only(store):
    assert [e.event_id for e in await store.list_events()] == ["e1", "e3", "e2"]
    assert [e.event_id for e in await store.list_events(active_only=True)] == ["e1", "e2"]


@pytest.mark.asyncio
async def test_set_event_locked_only_sets_true(store):
    assert await store.set_event_locked("e1") == 1
    assert (await store.get_event("e1")).is_locked is True
    # repeat write is harmless
    assert await store.set_event_locked("e1") == 1
    assert (await store.get_event("e1")).is_locked is True
    assert await store.list_lockable_events() == []


@pytest.mark.asyncio
async def test_questions_ordered_by_display_order(store):
    questions = await store.list_questions("e1")
    assert [q.question_id for q in questions] == ["q1", "q2"]
    assert questions[1].kind is QuestionKind.MULTIPLE_CHOICE
    assert questions[1].option_text("B") == "Eagles"


@pytest.mark.asyncio
async def test_grading_writes(store):
    await store.set_correct_answer("q2", "A")
    await store.set_accepted_aliases("q1", ["Stapleton", "C. Stapleton"])

    graded = await store.get_question("q2")
    assert graded.correct_answer == "A"
    aliased = await store.get_question("q1")
    assert aliased.accepted_answers == ("Stapleton", "C. Stapleton")

    await store.set_correct_answer("q2", None)
    assert (await store.get_question("q2")).is_graded is False


@pytest.mark.asyncio
async def test_insert_and_list_submissions(store):
    first = await store.insert_submission(
        "e1", _draft("pat"), submitted_at=datetime(2026, 2, 8, 20, 0, tzinfo=timezone.utc)
    )
    second = await store.insert_submission(
        "e1", _draft("sam", "B"), submitted_at=datetime(2026, 2, 8, 19, 0, tzinfo=timezone.utc)
    )
    await store.insert_submission("e1", _draft("pat", "B"))

    subs = await store.list_submissions("e1")
    assert [s.submission_id for s in subs][:2] == [second, first]
    assert subs[0].picks[0] == Pick(prop_id="q2", answer="B")

    pats = await store.list_submissions("e1", username="pat")
    assert len(pats) == 2
    assert await store.count_submissions("e1", "pat") == 2
    assert await store.count_submissions("e1", "nobody") == 0


@pytest.mark.asyncio
async def test_dbm_rejects_raw_sql(store):
    with pytest.raises(TypeError):
        await store.database.read("SELECT 1")
