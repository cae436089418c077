"""Façade over the model provider: cache, rate limiting, parsing and fallbacks.

Within one generate call the cache is consulted before the rate limiter, and the
rate limiter before the model, so cached answers never spend rate budget. Only
``InvalidArgument`` and ``RateLimited`` escape to callers; every other failure
degrades to deterministic fallback content.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Protocol, TypeVar

from .cache import ResponseCache, make_cache_key
from .errors import InvalidArgument, RateLimited, UpstreamUnavailable
from .fallbacks import EXPLANATION_FOLLOW_UP, EXPLANATION_SUGGESTIONS, FallbackLibrary
from .parsing import Parsed, Unparseable, decode_quiz, parse_lesson_plan
from .prompts import build_explanation_prompt, build_lesson_plan_prompt, build_quiz_prompt
from .rate_limiter import RateLimiter
from .schemas import (
	DIFFICULTIES,
	AIResponse,
	ChatMessageRecord,
	GenerationConfig,
	GradeResult,
	LessonPlan,
	ProgressUpdate,
	Quiz,
	QuizResultRecord,
)
from .settings import Settings
from .store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_QUESTION_COUNT = 20
LIVE_CONFIDENCE = 0.95
QUIZ_MASTER_BADGE = "quiz_master"

SUGGESTIONS_REMEDIAL: List[str] = [
	"Review the concepts again",
	"Try some practice problems",
	"Ask for help with specific topics",
]
SUGGESTIONS_REINFORCING: List[str] = [
	"Great job! Try some advanced problems",
	"Explore related topics",
	"Revisit the questions you missed",
]
SUGGESTIONS_ADVANCED: List[str] = [
	"Excellent work! You've mastered this topic",
	"Ready for more challenging material",
	"Try explaining this topic to a classmate",
]


class ModelProvider(Protocol):
	async def complete(self, prompt: str, config: Optional[GenerationConfig] = None) -> str: ...


@dataclass(frozen=True)
class FallbackOutcome(Generic[T]):
	value: T
	fell_back: bool


async def with_fallback(
	primary: Callable[[], Awaitable[T]],
	fallback: Callable[[], T],
	*,
	operation: str = "operation",
) -> FallbackOutcome[T]:
	"""Run ``primary``; on any failure other than caller errors, return ``fallback()``.

	Cancellation is not caught and propagates to the caller.
	"""
	try:
		return FallbackOutcome(await primary(), False)
	except (InvalidArgument, RateLimited):
		raise
	except Exception as err:
		logger.warning("%s failed (%s: %s); serving fallback content", operation, type(err).__name__, err)
		return FallbackOutcome(fallback(), True)


def _tier_level(percentage: float) -> str:
	if percentage >= 90:
		return "Mastery"
	if percentage >= 70:
		return "Proficient"
	return "Learning"


def _tier_suggestions(percentage: float) -> List[str]:
	if percentage < 70:
		return list(SUGGESTIONS_REMEDIAL)
	if percentage < 90:
		return list(SUGGESTIONS_REINFORCING)
	return list(SUGGESTIONS_ADVANCED)


def _require_text(name: str, value: Optional[str]) -> str:
	if not isinstance(value, str) or not value.strip():
		raise InvalidArgument(f"{name} must be a non-empty string")
	return value.strip()


def _require_difficulty(difficulty: str) -> str:
	if difficulty not in DIFFICULTIES:
		raise InvalidArgument(f"difficulty must be one of {list(DIFFICULTIES)}")
	return difficulty


class AIOrchestrator:
	"""Owns one cache and one rate-limit budget; construct once per application."""

	def __init__(
		self,
		model: ModelProvider,
		*,
		store: Optional[RecordStore] = None,
		cache: Optional[ResponseCache[Any]] = None,
		rate_limiter: Optional[RateLimiter] = None,
		generation_config: Optional[GenerationConfig] = None,
		model_timeout: float = 30.0,
		persist_timeout: float = 5.0,
		fallbacks: Optional[FallbackLibrary] = None,
		now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
	) -> None:
		self.model = model
		self.store = store
		self.cache: ResponseCache[Any] = cache if cache is not None else ResponseCache()
		self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
		self.generation_config = generation_config or GenerationConfig()
		self.model_timeout = model_timeout
		self.persist_timeout = persist_timeout
		self.fallbacks = fallbacks or FallbackLibrary()
		self._now = now

	def _cached(self, key: str) -> Any:
		# Callers get their own copy; the cached object is never handed out
		cached = self.cache.get(key)
		if cached is None:
			return None
		logger.debug("Cache hit: %s", key)
		return cached.model_copy(deep=True)

	def _remember(self, key: str, value: Any) -> None:
		self.cache.set(key, value.model_copy(deep=True))

	def _admit(self, operation: str) -> None:
		admitted, retry_after = self.rate_limiter.try_admit()
		if not admitted:
			logger.info("%s rate limited; retry in %.1fs", operation, retry_after)
			raise RateLimited(retry_after)

	async def _complete(self, prompt: str) -> str:
		try:
			text = await asyncio.wait_for(self.model.complete(prompt, self.generation_config), timeout=self.model_timeout)
		except asyncio.TimeoutError as err:
			raise UpstreamUnavailable(f"model call timed out after {self.model_timeout}s") from err
		if not isinstance(text, str) or not text.strip():
			raise UpstreamUnavailable("model returned empty output")
		return text

	async def _persist(self, what: str, write: Callable[[], Awaitable[None]]) -> None:
		if self.store is None:
			return
		try:
			await asyncio.wait_for(write(), timeout=self.persist_timeout)
		except asyncio.TimeoutError:
			logger.error("Persisting %s timed out after %ss", what, self.persist_timeout)
		except Exception:
			logger.error("Failed to persist %s", what, exc_info=True)

	async def generate_explanation(
		self,
		topic: str,
		difficulty: str = "intermediate",
		language: str = "en",
		grade_level: Optional[str] = None,
		user_id: Optional[str] = None,
		session_id: Optional[str] = None,
	) -> AIResponse:
		topic = _require_text("topic", topic)
		difficulty = _require_difficulty(difficulty)
		language = _require_text("language", language)

		key = make_cache_key("explanation", topic, difficulty, language, grade_level)
		cached = self._cached(key)
		if cached is not None:
			return cached

		self._admit("explanation")
		prompt = build_explanation_prompt(topic, difficulty, language, grade_level)

		async def _live() -> AIResponse:
			text = await self._complete(prompt)
			return AIResponse(
				content=text.strip(),
				kind="explanation",
				confidence=LIVE_CONFIDENCE,
				suggestions=list(EXPLANATION_SUGGESTIONS),
				follow_up=list(EXPLANATION_FOLLOW_UP),
			)

		outcome = await with_fallback(
			_live,
			lambda: self.fallbacks.explanation(topic, difficulty),
			operation=f"explanation({topic!r})",
		)
		if outcome.fell_back:
			return outcome.value

		response = outcome.value
		self._remember(key, response)
		if user_id and self.store is not None:
			record = ChatMessageRecord(
				user_id=user_id,
				message=topic,
				response=response.content,
				timestamp=self._now(),
				session_id=session_id,
			)
			await self._persist("chat message", lambda: self.store.save_chat_message(record))
		return response

	async def generate_quiz(
		self,
		topic: str,
		difficulty: str = "intermediate",
		question_count: int = 5,
		user_id: Optional[str] = None,
	) -> Quiz:
		topic = _require_text("topic", topic)
		difficulty = _require_difficulty(difficulty)
		if not isinstance(question_count, int) or isinstance(question_count, bool) or not 1 <= question_count <= MAX_QUESTION_COUNT:
			raise InvalidArgument(f"question_count must be an integer between 1 and {MAX_QUESTION_COUNT}")

		key = make_cache_key("quiz", topic, difficulty, question_count)
		cached = self._cached(key)
		if cached is not None:
			return cached

		self._admit("quiz")
		prompt = build_quiz_prompt(topic, difficulty, question_count)

		async def _live():
			raw = await self._complete(prompt)
			return decode_quiz(raw, topic, difficulty)

		outcome = await with_fallback(
			_live,
			lambda: Unparseable("model unavailable"),
			operation=f"quiz({topic!r})",
		)
		result = outcome.value
		if isinstance(result, Parsed):
			logger.info("Generated %d-question quiz on %r for user %s", len(result.value.questions), topic, user_id or "anonymous")
			self._remember(key, result.value)
			return result.value
		if not outcome.fell_back:
			logger.warning("Quiz output for %r unparseable (%s); using fallback quiz", topic, result.reason)
		return self.fallbacks.quiz(topic, difficulty)

	async def generate_lesson_plan(
		self,
		topic: str,
		grade: str,
		duration: int = 45,
		subject: str = "General",
	) -> LessonPlan:
		topic = _require_text("topic", topic)
		grade = _require_text("grade", grade)
		subject = _require_text("subject", subject)
		if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
			raise InvalidArgument("duration must be a positive number of minutes")

		key = make_cache_key("lesson_plan", topic, grade, duration, subject)
		cached = self._cached(key)
		if cached is not None:
			return cached

		self._admit("lesson_plan")
		prompt = build_lesson_plan_prompt(topic, grade, duration, subject)
		created_at = self._now()

		async def _live() -> LessonPlan:
			raw = await self._complete(prompt)
			return parse_lesson_plan(raw, topic, grade, duration, subject, created_at, self.fallbacks)

		outcome = await with_fallback(
			_live,
			lambda: self.fallbacks.lesson_plan(topic, grade, duration, subject, created_at),
			operation=f"lesson_plan({topic!r})",
		)
		if not outcome.fell_back:
			self._remember(key, outcome.value)
		return outcome.value

	async def grade_quiz(
		self,
		quiz: Quiz,
		answers: Dict[str, str],
		user_id: Optional[str] = None,
		time_taken: Optional[int] = None,
	) -> GradeResult:
		if answers is None:
			answers = {}
		score = 0
		total_points = 0
		correct_count = 0
		feedback: List[str] = []
		for question in quiz.questions:
			total_points += question.points
			if question.is_correct(answers.get(question.id)):
				score += question.points
				correct_count += 1
				feedback.append(f"✅ Question {question.id}: Correct! {question.explanation}")
			else:
				feedback.append(f"❌ Question {question.id}: Incorrect. {question.explanation}")

		percentage = 100.0 * score / total_points if total_points else 0.0
		xp_gained = 10 * correct_count + (50 if percentage >= 80 else 0)
		result = GradeResult(
			score=score,
			total_points=total_points,
			percentage=percentage,
			correct_count=correct_count,
			feedback=feedback,
			suggestions=_tier_suggestions(percentage),
			xp_gained=xp_gained,
		)

		if user_id and self.store is not None:
			quiz_record = QuizResultRecord(
				user_id=user_id,
				topic=quiz.topic,
				score=score,
				total_questions=len(quiz.questions),
				completed_at=self._now(),
				time_taken=time_taken,
			)
			progress = ProgressUpdate(
				xp_delta=xp_gained,
				# Streak tracking lives in the record store; the grader reports a single active day
				streak=1,
				level=_tier_level(percentage),
				badges=[QUIZ_MASTER_BADGE] if percentage >= 90 else [],
			)
			await self._persist("quiz result", lambda: self.store.save_quiz_result(quiz_record))
			await self._persist("progress", lambda: self.store.update_progress(user_id, quiz.topic, progress))
		return result


def build_orchestrator(cfg: Settings, *, model: Optional[ModelProvider] = None, store: Optional[RecordStore] = None) -> AIOrchestrator:
	if model is None:
		from .gemini_client import GeminiClient
		model = GeminiClient(settings=cfg)
	return AIOrchestrator(
		model,
		store=store,
		cache=ResponseCache(cfg.cache_timeout_seconds, max_entries=cfg.cache_max_entries),
		rate_limiter=RateLimiter(cfg.rate_limit_max_requests, cfg.rate_limit_window_seconds),
		generation_config=GenerationConfig(
			temperature=cfg.gemini_temperature,
			top_k=cfg.gemini_top_k,
			top_p=cfg.gemini_top_p,
			max_output_tokens=cfg.gemini_max_output_tokens,
		),
		model_timeout=cfg.model_timeout_seconds,
		persist_timeout=cfg.persist_timeout_seconds,
	)
