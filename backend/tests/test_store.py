import asyncio
import json

import pytest

from edututor.db import init_db, make_engine, make_session_factory
from edututor.models import ChatMessage, QuizResult, UserProgress
from edututor.schemas import ChatMessageRecord, ProgressUpdate, QuizResultRecord
from edututor.store import SqlAlchemyRecordStore

from conftest import FIXED_NOW


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'store.db'}")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


def test_chat_message_round_trip(session_factory):
    store = SqlAlchemyRecordStore(session_factory)
    asyncio.run(store.save_chat_message(ChatMessageRecord(
        user_id="u1", message="Gravity", response="It pulls.", timestamp=FIXED_NOW, session_id="s1",
    )))
    with session_factory() as db:
        row = db.query(ChatMessage).one()
        assert (row.user_id, row.message, row.response, row.session_id) == ("u1", "Gravity", "It pulls.", "s1")


def test_quiz_result_saved(session_factory):
    store = SqlAlchemyRecordStore(session_factory)
    asyncio.run(store.save_quiz_result(QuizResultRecord(
        user_id="u1", topic="Gravity", score=10, total_questions=2, completed_at=FIXED_NOW, time_taken=42,
    )))
    with session_factory() as db:
        row = db.query(QuizResult).one()
        assert (row.score, row.total_questions, row.time_taken) == (10, 2, 42)


def test_progress_accumulates_xp_and_merges_badges(session_factory):
    store = SqlAlchemyRecordStore(session_factory)
    asyncio.run(store.update_progress("u1", "Gravity", ProgressUpdate(xp_delta=70, streak=1, level="Mastery", badges=["quiz_master"])))
    asyncio.run(store.update_progress("u1", "Gravity", ProgressUpdate(xp_delta=10, streak=1, level="Learning", badges=["quiz_master"])))
    asyncio.run(store.update_progress("u1", "Optics", ProgressUpdate(xp_delta=5, streak=1, level="Learning")))
    with session_factory() as db:
        gravity = db.query(UserProgress).filter_by(user_id="u1", subject="Gravity").one()
        assert gravity.xp == 80
        assert gravity.level == "Learning"
        assert json.loads(gravity.badges_json) == ["quiz_master"]
        assert db.query(UserProgress).count() == 2
