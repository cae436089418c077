from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


Difficulty = Literal["beginner", "intermediate", "advanced"]
QuestionKind = Literal["multiple-choice", "true-false", "short-answer"]
ActivityKind = Literal["discussion", "hands-on", "presentation", "group-work"]
Role = Literal["student", "teacher"]

DIFFICULTIES: tuple[str, ...] = ("beginner", "intermediate", "advanced")


class Question(BaseModel):
	id: str
	kind: QuestionKind = "multiple-choice"
	question: str
	options: Optional[List[str]] = None
	# One accepted value, or a list of acceptable values
	correct_answer: Union[str, List[str]]
	explanation: str = ""
	points: int = Field(default=10, gt=0)

	@model_validator(mode="after")
	def _check_options(self) -> "Question":
		if self.kind == "multiple-choice":
			if not self.options:
				raise ValueError("multiple-choice questions require options")
			accepted = self.correct_answer if isinstance(self.correct_answer, list) else [self.correct_answer]
			missing = [a for a in accepted if a not in self.options]
			if missing:
				raise ValueError(f"correct answer not among options: {missing}")
		return self

	def is_correct(self, submitted: Optional[str]) -> bool:
		if submitted is None:
			return False
		if isinstance(self.correct_answer, list):
			return submitted in self.correct_answer
		return submitted == self.correct_answer


class Quiz(BaseModel):
	id: str
	title: str
	topic: str
	difficulty: Difficulty
	time_limit: Optional[int] = Field(default=None, description="Seconds")
	questions: List[Question]

	@field_validator("questions")
	@classmethod
	def _unique_ids(cls, questions: List[Question]) -> List[Question]:
		if not questions:
			raise ValueError("a quiz needs at least one question")
		ids = [q.id for q in questions]
		if len(set(ids)) != len(ids):
			raise ValueError("question ids must be unique within a quiz")
		return questions


class Activity(BaseModel):
	id: str
	name: str
	description: str
	duration: int = Field(gt=0, description="Minutes")
	kind: ActivityKind


class LessonPlan(BaseModel):
	id: str
	title: str
	subject: str
	grade: str
	duration: int = Field(gt=0, description="Minutes")
	objectives: List[str]
	materials: List[str]
	activities: List[Activity]
	assessment: str
	created_by: str = "ai-assistant"
	created_at: datetime

	@field_validator("objectives")
	@classmethod
	def _non_empty_objectives(cls, objectives: List[str]) -> List[str]:
		if any(not o.strip() for o in objectives):
			raise ValueError("objectives must be non-empty strings")
		return objectives

	@property
	def planned_minutes(self) -> int:
		# May exceed duration; that is tolerated
		return sum(a.duration for a in self.activities)


class AIResponse(BaseModel):
	content: str
	kind: Literal["explanation"] = "explanation"
	confidence: float = Field(ge=0.0, le=1.0)
	suggestions: List[str] = Field(default_factory=list)
	follow_up: List[str] = Field(default_factory=list)


class GradeResult(BaseModel):
	score: int
	total_points: int
	percentage: float
	correct_count: int
	feedback: List[str]
	suggestions: List[str]
	xp_gained: int


class GenerationConfig(BaseModel):
	temperature: float = 0.7
	top_k: int = 40
	top_p: float = 0.95
	max_output_tokens: int = 1024

	def to_gemini(self) -> dict:
		return {
			"temperature": self.temperature,
			"topK": self.top_k,
			"topP": self.top_p,
			"maxOutputTokens": self.max_output_tokens,
		}


class Preferences(BaseModel):
	difficulty: Difficulty = "intermediate"
	language: str = "en"


class CurrentUser(BaseModel):
	id: str
	role: Role = "student"
	preferences: Preferences = Field(default_factory=Preferences)


class ChatMessageRecord(BaseModel):
	user_id: str
	message: str
	response: str
	timestamp: datetime
	session_id: Optional[str] = None


class QuizResultRecord(BaseModel):
	user_id: str
	topic: str
	score: int
	total_questions: int
	completed_at: datetime
	time_taken: Optional[int] = None


class ProgressUpdate(BaseModel):
	xp_delta: int
	streak: int
	level: str
	badges: List[str] = Field(default_factory=list)
