import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from edututor.identity import create_access_token
from edututor.routers import tutor
from edututor.schemas import CurrentUser, Preferences

from conftest import QUIZ_JSON, FakeModel


def _headers(user: CurrentUser) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


STUDENT = CurrentUser(id="s1", role="student", preferences=Preferences(difficulty="beginner", language="en"))
TEACHER = CurrentUser(id="t1", role="teacher")


@pytest.fixture
def model():
    return FakeModel(reply=QUIZ_JSON)


@pytest.fixture
def client(make_orchestrator, model, store):
    app = FastAPI()
    app.include_router(tutor.router)
    app.state.orchestrator = make_orchestrator(model, store=store, max_requests=2)
    return TestClient(app)


def test_requires_token(client):
    assert client.post("/tutor/explanation", json={"topic": "Gravity"}).status_code == 401


def test_explanation_uses_user_preferences(client, model, store):
    r = client.post("/tutor/explanation", json={"topic": "Gravity"}, headers=_headers(STUDENT))
    assert r.status_code == 200
    assert r.json()["kind"] == "explanation"
    assert "beginner" in model.prompts[0]
    assert store.chat_messages[0].user_id == "s1"


def test_quiz_endpoint_returns_parsed_quiz(client):
    r = client.post("/tutor/quiz", json={"topic": "Gravity", "question_count": 2}, headers=_headers(STUDENT))
    assert r.status_code == 200
    body = r.json()
    assert body["difficulty"] == "beginner"
    assert len(body["questions"]) == 2


def test_invalid_argument_maps_to_400(client):
    r = client.post("/tutor/explanation", json={"topic": "  "}, headers=_headers(STUDENT))
    assert r.status_code == 400


def test_rate_limit_maps_to_429_with_retry_after(client):
    for topic in ("Gravity", "Optics"):
        assert client.post("/tutor/explanation", json={"topic": topic}, headers=_headers(STUDENT)).status_code == 200
    r = client.post("/tutor/explanation", json={"topic": "Magnetism"}, headers=_headers(STUDENT))
    assert r.status_code == 429
    assert int(r.headers["Retry-After"]) >= 1


def test_lesson_plan_requires_teacher(client):
    body = {"topic": "Volcanoes", "grade": "5", "duration": 50}
    assert client.post("/tutor/lesson-plan", json=body, headers=_headers(STUDENT)).status_code == 403
    r = client.post("/tutor/lesson-plan", json=body, headers=_headers(TEACHER))
    assert r.status_code == 200
    assert [a["duration"] for a in r.json()["activities"]] == [10, 20, 15, 5]


def test_grade_endpoint(client, store):
    quiz = client.post("/tutor/quiz", json={"topic": "Gravity", "question_count": 2}, headers=_headers(STUDENT)).json()
    answers = {"1": "Gravity", "2": "1 m/s^2"}
    r = client.post("/tutor/quiz/grade", json={"quiz": quiz, "answers": answers, "time_taken": 30}, headers=_headers(STUDENT))
    assert r.status_code == 200
    body = r.json()
    assert (body["score"], body["total_points"], body["xp_gained"]) == (10, 20, 10)
    assert store.quiz_results[0].time_taken == 30
