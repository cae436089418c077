from __future__ import annotations
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..errors import InvalidArgument, RateLimited
from ..identity import get_current_user, require_teacher
from ..orchestrator import AIOrchestrator
from ..schemas import AIResponse, CurrentUser, Difficulty, GradeResult, LessonPlan, Quiz


router = APIRouter(prefix="/tutor", tags=["tutor"])


def get_orchestrator(request: Request) -> AIOrchestrator:
	return request.app.state.orchestrator


class ExplanationRequest(BaseModel):
	topic: str
	difficulty: Optional[Difficulty] = None
	language: Optional[str] = None
	grade_level: Optional[str] = None
	session_id: Optional[str] = None


class QuizRequest(BaseModel):
	topic: str
	difficulty: Optional[Difficulty] = None
	question_count: int = 5


class LessonPlanRequest(BaseModel):
	topic: str
	grade: str
	duration: int = 45
	subject: str = "General"


class GradeRequest(BaseModel):
	quiz: Quiz
	answers: Dict[str, str] = Field(default_factory=dict)
	time_taken: Optional[int] = Field(default=None, description="Seconds")


def _http_error(err: Exception) -> HTTPException:
	if isinstance(err, RateLimited):
		return HTTPException(
			status_code=429,
			detail=str(err),
			headers={"Retry-After": str(max(1, int(round(err.retry_after))))},
		)
	return HTTPException(status_code=400, detail=str(err))


@router.post("/explanation", response_model=AIResponse)
async def explanation(
	req: ExplanationRequest,
	user: CurrentUser = Depends(get_current_user),
	orchestrator: AIOrchestrator = Depends(get_orchestrator),
):
	try:
		return await orchestrator.generate_explanation(
			req.topic,
			difficulty=req.difficulty or user.preferences.difficulty,
			language=req.language or user.preferences.language,
			grade_level=req.grade_level,
			user_id=user.id,
			session_id=req.session_id,
		)
	except (InvalidArgument, RateLimited) as err:
		raise _http_error(err)


@router.post("/quiz", response_model=Quiz)
async def quiz(
	req: QuizRequest,
	user: CurrentUser = Depends(get_current_user),
	orchestrator: AIOrchestrator = Depends(get_orchestrator),
):
	try:
		return await orchestrator.generate_quiz(
			req.topic,
			difficulty=req.difficulty or user.preferences.difficulty,
			question_count=req.question_count,
			user_id=user.id,
		)
	except (InvalidArgument, RateLimited) as err:
		raise _http_error(err)


@router.post("/lesson-plan", response_model=LessonPlan)
async def lesson_plan(
	req: LessonPlanRequest,
	user: CurrentUser = Depends(require_teacher),
	orchestrator: AIOrchestrator = Depends(get_orchestrator),
):
	try:
		return await orchestrator.generate_lesson_plan(req.topic, req.grade, duration=req.duration, subject=req.subject)
	except (InvalidArgument, RateLimited) as err:
		raise _http_error(err)


@router.post("/quiz/grade", response_model=GradeResult)
async def grade(
	req: GradeRequest,
	user: CurrentUser = Depends(get_current_user),
	orchestrator: AIOrchestrator = Depends(get_orchestrator),
):
	return await orchestrator.grade_quiz(req.quiz, req.answers, user_id=user.id, time_taken=req.time_taken)
