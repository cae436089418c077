import asyncio
import json
from datetime import datetime, timezone

import pytest

from edututor.cache import ResponseCache
from edututor.orchestrator import AIOrchestrator
from edututor.rate_limiter import RateLimiter


FIXED_NOW = datetime(2024, 9, 2, 8, 30, tzinfo=timezone.utc)

QUIZ_JSON = json.dumps({
    "questions": [
        {
            "question": "What force pulls objects toward Earth?",
            "options": ["Gravity", "Friction", "Magnetism", "Tension"],
            "correctAnswer": "Gravity",
            "explanation": "Gravity attracts masses toward each other.",
        },
        {
            "question": "What is the acceleration due to gravity near Earth's surface?",
            "options": ["1 m/s^2", "9.8 m/s^2", "98 m/s^2", "0.98 m/s^2"],
            "correctAnswer": "9.8 m/s^2",
            "explanation": "Near the surface, g is about 9.8 m/s^2.",
        },
    ]
})


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeModel:
    """Model provider double: returns ``reply`` or raises ``error``."""

    def __init__(self, reply: str = "A clear explanation.", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.configs: list = []

    async def complete(self, prompt, config=None):
        self.prompts.append(prompt)
        self.configs.append(config)
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def calls(self) -> int:
        return len(self.prompts)


class FakeStore:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.chat_messages = []
        self.quiz_results = []
        self.progress = []

    def _maybe_fail(self) -> None:
        if self.fail:
            raise RuntimeError("store offline")

    async def save_chat_message(self, record) -> None:
        self._maybe_fail()
        self.chat_messages.append(record)

    async def save_quiz_result(self, record) -> None:
        self._maybe_fail()
        self.quiz_results.append(record)

    async def update_progress(self, user_id, subject, update) -> None:
        self._maybe_fail()
        self.progress.append((user_id, subject, update))


class HangingStore(FakeStore):
    """Store whose writes never finish."""

    async def save_chat_message(self, record) -> None:
        await asyncio.sleep(3600)

    async def save_quiz_result(self, record) -> None:
        await asyncio.sleep(3600)

    async def update_progress(self, user_id, subject, update) -> None:
        await asyncio.sleep(3600)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def model():
    return FakeModel()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def make_orchestrator(clock):
    def _make(model, *, store=None, max_requests=10, window=60.0, cache_timeout=300.0, model_timeout=30.0, persist_timeout=5.0):
        return AIOrchestrator(
            model,
            store=store,
            cache=ResponseCache(cache_timeout, clock=clock),
            rate_limiter=RateLimiter(max_requests, window, clock=clock),
            model_timeout=model_timeout,
            persist_timeout=persist_timeout,
            now=lambda: FIXED_NOW,
        )
    return _make
