from __future__ import annotations

import asyncio
import json
from typing import Protocol

from sqlalchemy.orm import Session, sessionmaker

from .models import ChatMessage, QuizResult, UserProgress
from .schemas import ChatMessageRecord, ProgressUpdate, QuizResultRecord


class RecordStore(Protocol):
	"""Persistence side channel used by the orchestrator. Failures are never fatal to it."""

	async def save_chat_message(self, record: ChatMessageRecord) -> None: ...

	async def save_quiz_result(self, record: QuizResultRecord) -> None: ...

	async def update_progress(self, user_id: str, subject: str, update: ProgressUpdate) -> None: ...


class SqlAlchemyRecordStore:
	"""RecordStore over the SQLAlchemy models; session work runs in a worker thread."""

	def __init__(self, session_factory: sessionmaker) -> None:
		self._session_factory = session_factory

	def _write(self, fn) -> None:
		db: Session = self._session_factory()
		try:
			fn(db)
			db.commit()
		except Exception:
			db.rollback()
			raise
		finally:
			db.close()

	async def save_chat_message(self, record: ChatMessageRecord) -> None:
		def _save(db: Session) -> None:
			db.add(ChatMessage(
				user_id=record.user_id,
				session_id=record.session_id,
				message=record.message,
				response=record.response,
				created_at=record.timestamp,
			))
		await asyncio.to_thread(self._write, _save)

	async def save_quiz_result(self, record: QuizResultRecord) -> None:
		def _save(db: Session) -> None:
			db.add(QuizResult(
				user_id=record.user_id,
				topic=record.topic,
				score=record.score,
				total_questions=record.total_questions,
				time_taken=record.time_taken,
				completed_at=record.completed_at,
			))
		await asyncio.to_thread(self._write, _save)

	async def update_progress(self, user_id: str, subject: str, update: ProgressUpdate) -> None:
		def _upsert(db: Session) -> None:
			row = db.query(UserProgress).filter(UserProgress.user_id == user_id, UserProgress.subject == subject).first()
			if row is None:
				row = UserProgress(user_id=user_id, subject=subject, xp=0, streak=0, badges_json="[]")
			row.xp = (row.xp or 0) + update.xp_delta
			row.streak = update.streak
			row.level = update.level
			try:
				badges = list(json.loads(row.badges_json or "[]"))
			except ValueError:
				badges = []
			for badge in update.badges:
				if badge not in badges:
					badges.append(badge)
			row.badges_json = json.dumps(badges)
			db.add(row)
		await asyncio.to_thread(self._write, _upsert)
