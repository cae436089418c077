from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text, UniqueConstraint
from .db import Base


class ChatMessage(Base):
	__tablename__ = "chat_messages"
	id = Column(Integer, primary_key=True, autoincrement=True)
	user_id = Column(String(128), index=True, nullable=False)
	session_id = Column(String(64), nullable=True, index=True)
	# The topic the learner asked about and the generated explanation
	message = Column(Text, nullable=False)
	response = Column(Text, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class QuizResult(Base):
	__tablename__ = "quiz_results"
	id = Column(Integer, primary_key=True, autoincrement=True)
	user_id = Column(String(128), index=True, nullable=False)
	topic = Column(String(256), nullable=False)
	score = Column(Integer, nullable=False)
	total_questions = Column(Integer, nullable=False)
	time_taken = Column(Integer, nullable=True)  # seconds
	completed_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserProgress(Base):
	__tablename__ = "user_progress"
	__table_args__ = (UniqueConstraint("user_id", "subject", name="uq_progress_user_subject"),)
	id = Column(Integer, primary_key=True, autoincrement=True)
	user_id = Column(String(128), index=True, nullable=False)
	subject = Column(String(256), nullable=False)
	xp = Column(Integer, default=0, nullable=False)
	streak = Column(Integer, default=0, nullable=False)
	level = Column(String(32), nullable=True)
	badges_json = Column(Text, default="[]", nullable=False)  # JSON array of badge ids
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
