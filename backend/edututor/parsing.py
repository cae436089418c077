from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import ValidationError

from .fallbacks import EPOCH, FallbackLibrary
from .schemas import LessonPlan, Question, Quiz

logger = logging.getLogger(__name__)

T = TypeVar("T")

POINTS_PER_QUESTION = 10
SECONDS_PER_QUESTION = 60


@dataclass(frozen=True)
class Parsed(Generic[T]):
	value: T


@dataclass(frozen=True)
class Unparseable:
	reason: str


ParseResult = Union[Parsed[T], Unparseable]


def extract_json_object(text: str) -> Dict[str, Any]:
	try:
		data = json.loads(text)
		if isinstance(data, dict):
			return data
	except Exception:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			data = json.loads(code_block.group(1))
			if isinstance(data, dict):
				return data
		except Exception:
			pass
	first = text.find("{")
	last = text.rfind("}")
	if first != -1 and last != -1 and last > first:
		candidate = text[first : last + 1]
		try:
			data = json.loads(candidate)
			if isinstance(data, dict):
				return data
		except Exception:
			pass
	raise ValueError("model output does not contain a JSON object")


def _decode_question(index: int, item: Any) -> Question:
	if not isinstance(item, dict):
		raise ValueError(f"question {index} is not an object")
	text = item.get("question")
	answer = item.get("correctAnswer")
	if not isinstance(text, str) or not text.strip():
		raise ValueError(f"question {index} has no question text")
	if isinstance(answer, list):
		answer = [str(a).strip() for a in answer]
	elif isinstance(answer, (str, int, float, bool)):
		answer = str(answer).strip()
	else:
		raise ValueError(f"question {index} has no correctAnswer")
	options = item.get("options")
	if isinstance(options, list) and options:
		kind = "multiple-choice"
		options = [str(o).strip() for o in options]
	else:
		kind = "short-answer"
		options = None
	explanation = item.get("explanation")
	return Question(
		id=str(index),
		kind=kind,
		question=text.strip(),
		options=options,
		correct_answer=answer,
		explanation=explanation.strip() if isinstance(explanation, str) else "",
		points=POINTS_PER_QUESTION,
	)


def decode_quiz(raw: str, topic: str, difficulty: str) -> ParseResult[Quiz]:
	"""Strict decode of model text into a Quiz. Never raises."""
	try:
		data = extract_json_object(raw or "")
		items = data.get("questions")
		if not isinstance(items, list) or not items:
			return Unparseable("missing or empty 'questions' list")
		questions: List[Question] = [_decode_question(i, item) for i, item in enumerate(items, start=1)]
		quiz = Quiz(
			id=f"quiz-{uuid.uuid4().hex[:12]}",
			title=f"{topic} Quiz",
			topic=topic,
			difficulty=difficulty,
			time_limit=SECONDS_PER_QUESTION * len(questions),
			questions=questions,
		)
		return Parsed(quiz)
	except (ValueError, ValidationError) as err:
		return Unparseable(str(err))


def parse_quiz(raw: str, topic: str, difficulty: str, fallbacks: Optional[FallbackLibrary] = None) -> Quiz:
	result = decode_quiz(raw, topic, difficulty)
	if isinstance(result, Parsed):
		return result.value
	logger.warning("Quiz output for %r unparseable (%s); using fallback quiz", topic, result.reason)
	return (fallbacks or FallbackLibrary()).quiz(topic, difficulty)


def parse_lesson_plan(
	raw: str,
	topic: str,
	grade: str,
	duration: int,
	subject: str,
	created_at: datetime = EPOCH,
	fallbacks: Optional[FallbackLibrary] = None,
) -> LessonPlan:
	# Free-text plans are not mined for structure; the template is always used.
	return (fallbacks or FallbackLibrary()).lesson_plan(topic, grade, duration, subject, created_at)
