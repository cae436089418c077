"""Deterministic substitute content used whenever the model cannot answer.

Everything here is keyed by (topic, difficulty) and built without clocks or
randomness, so two calls with the same arguments return equal objects.
"""
from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .schemas import DIFFICULTIES, Activity, AIResponse, LessonPlan, Question, Quiz


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

EXPLANATION_SUGGESTIONS: List[str] = [
	"Would you like me to create a quiz on this topic?",
	"Should I explain this with more examples?",
	"Would you like to see this concept in action?",
]
EXPLANATION_FOLLOW_UP: List[str] = [
	"What part would you like me to explain further?",
	"How does this relate to what you already know?",
]

_EXPLANATIONS: Dict[str, Dict[str, str]] = {
	"newton's laws": {
		"beginner": (
			"Newton's Laws are like rules for how things move! Imagine you're playing with toy cars. "
			"A car sitting still stays still until you push it, and a rolling car keeps rolling until something stops it. "
			"Push harder and it speeds up faster. And when you push the car, the car pushes back on your hand just as hard."
		),
		"intermediate": (
			"Newton's Three Laws of Motion describe the relationship between forces and motion. "
			"First, an object keeps its state of rest or uniform motion unless a net force acts on it (inertia). "
			"Second, the net force equals mass times acceleration, F = ma. "
			"Third, every action has an equal and opposite reaction: forces always come in pairs acting on different objects."
		),
		"advanced": (
			"Newton's laws form the foundation of classical mechanics, mathematically describing motion in inertial frames. "
			"The first law defines inertial reference frames; the second states F = dp/dt, which reduces to F = ma for constant mass; "
			"the third expresses conservation of momentum for isolated systems. "
			"They break down at relativistic speeds and atomic scales, where special relativity and quantum mechanics apply."
		),
	},
	"photosynthesis": {
		"beginner": (
			"Photosynthesis is how plants make their own food. Leaves catch sunlight like tiny solar panels, "
			"take in water from the roots and air through little holes, and turn them into sugar. "
			"The leftover oxygen goes back into the air for us to breathe."
		),
		"intermediate": (
			"Photosynthesis converts light energy into chemical energy. In the chloroplasts, chlorophyll absorbs light, "
			"and the plant combines carbon dioxide and water into glucose, releasing oxygen: "
			"6CO2 + 6H2O + light -> C6H12O6 + 6O2."
		),
		"advanced": (
			"Photosynthesis couples the light-dependent reactions in the thylakoid membranes, which split water and produce ATP and NADPH "
			"through photosystems II and I, to the Calvin cycle in the stroma, where RuBisCO fixes CO2 into three-carbon sugars. "
			"Photorespiration and C4/CAM adaptations modulate its efficiency under different conditions."
		),
	},
	"gravity": {
		"beginner": (
			"Gravity is an invisible pull between things. The Earth is so big that it pulls everything toward it, "
			"which is why a ball falls down when you drop it and why we don't float away."
		),
		"intermediate": (
			"Gravity is the attractive force between masses. Near Earth's surface it gives every object the same acceleration, "
			"about 9.8 m/s^2, if air resistance is ignored. Newton's law of universal gravitation says the force grows with the masses "
			"and shrinks with the square of the distance between them."
		),
		"advanced": (
			"In Newtonian terms gravity is F = G m1 m2 / r^2, a conservative central force with potential energy -G m1 m2 / r. "
			"General relativity reinterprets it as the curvature of spacetime produced by energy and momentum, "
			"which explains effects such as the perihelion precession of Mercury and gravitational lensing."
		),
	},
}

_NEWTON_QUESTIONS: List[Question] = [
	Question(
		id="1",
		kind="multiple-choice",
		question="What is Newton's First Law of Motion also known as?",
		options=["Law of Inertia", "Law of Acceleration", "Law of Action-Reaction", "Law of Gravity"],
		correct_answer="Law of Inertia",
		explanation="Newton's First Law is called the Law of Inertia because it describes how objects resist changes in motion.",
		points=10,
	),
	Question(
		id="2",
		kind="multiple-choice",
		question="According to Newton's Second Law, what happens when you apply more force to an object?",
		options=["It moves slower", "It accelerates more", "Nothing changes", "It stops moving"],
		correct_answer="It accelerates more",
		explanation="F = ma shows that force and acceleration are directly proportional.",
		points=10,
	),
]


def _normalize(topic: str) -> str:
	return " ".join(topic.strip().lower().split())


def _stable_id(*parts: object) -> str:
	digest = hashlib.sha1("|".join(str(p) for p in parts).encode("utf-8")).hexdigest()
	return f"fallback-{digest[:12]}"


def _generic_questions(topic: str) -> List[Question]:
	return [
		Question(
			id="1",
			kind="multiple-choice",
			question=f"Which statement best describes the main idea of {topic}?",
			options=[
				f"It explains a core principle of {topic}",
				"It is unrelated to the subject",
				"It only applies to historical events",
				"It has no practical use",
			],
			correct_answer=f"It explains a core principle of {topic}",
			explanation=f"Every topic, including {topic}, is built around a core principle worth identifying first.",
			points=10,
		),
		Question(
			id="2",
			kind="multiple-choice",
			question=f"What is the best way to check your understanding of {topic}?",
			options=[
				"Memorize the title",
				f"Apply {topic} to a new example",
				"Skip the practice problems",
				"Read the summary only once",
			],
			correct_answer=f"Apply {topic} to a new example",
			explanation="Applying an idea to an unfamiliar example shows you understand it rather than just remember it.",
			points=10,
		),
	]


class FallbackLibrary:
	"""Pre-authored content for every public operation."""

	quiz_time_limit = 300
	# hook, explanation, hands-on, wrap-up
	activity_split = (20, 40, 30, 10)

	def explanation(self, topic: str, difficulty: str) -> AIResponse:
		by_difficulty = _EXPLANATIONS.get(_normalize(topic))
		content: Optional[str] = by_difficulty.get(difficulty) if by_difficulty else None
		if content is not None:
			confidence = 0.95
		else:
			content = (
				f"Let me explain {topic} in a way that's perfect for your learning level. "
				f"Start with the big idea behind {topic}, then look at one concrete example, "
				"and finally try to describe it in your own words."
			)
			confidence = 0.5
		return AIResponse(
			content=content,
			kind="explanation",
			confidence=confidence,
			suggestions=list(EXPLANATION_SUGGESTIONS),
			follow_up=list(EXPLANATION_FOLLOW_UP),
		)

	def quiz(self, topic: str, difficulty: str) -> Quiz:
		if _normalize(topic) == "newton's laws":
			questions = [q.model_copy(deep=True) for q in _NEWTON_QUESTIONS]
		else:
			questions = _generic_questions(topic)
		return Quiz(
			id=_stable_id("quiz", topic, difficulty),
			title=f"{topic} Quiz",
			topic=topic,
			difficulty=difficulty if difficulty in DIFFICULTIES else "intermediate",
			time_limit=self.quiz_time_limit,
			questions=questions,
		)

	def activity_durations(self, duration: int) -> List[int]:
		# Floor of each share; never below one minute
		return [max(1, duration * pct // 100) for pct in self.activity_split]

	def lesson_plan(
		self,
		topic: str,
		grade: str,
		duration: int = 45,
		subject: str = "General",
		created_at: datetime = EPOCH,
	) -> LessonPlan:
		hook, explain, hands_on, wrap_up = self.activity_durations(duration)
		activities = [
			Activity(
				id="1",
				name="Introduction and Hook",
				description=f"Open with a short demonstration or question about {topic} to capture attention",
				duration=hook,
				kind="presentation",
			),
			Activity(
				id="2",
				name="Concept Explanation",
				description=f"Explain the key ideas of {topic} with visual aids and real-world examples",
				duration=explain,
				kind="presentation",
			),
			Activity(
				id="3",
				name="Hands-on Activity",
				description=f"Students work in pairs on a practical task that applies {topic}",
				duration=hands_on,
				kind="hands-on",
			),
			Activity(
				id="4",
				name="Wrap-up Discussion",
				description="Review key concepts and answer remaining questions",
				duration=wrap_up,
				kind="discussion",
			),
		]
		return LessonPlan(
			id=_stable_id("lesson", topic, grade, duration, subject),
			title=f"{topic} - Grade {grade}",
			subject=subject,
			grade=grade,
			duration=duration,
			objectives=[
				f"Students will understand the core ideas of {topic}",
				f"Students will be able to apply {topic} to real-world scenarios",
				"Students will demonstrate understanding through practical examples",
			],
			materials=[
				"Whiteboard and markers",
				"Video demonstrations",
				"Worksheet handouts",
				"Materials for the hands-on task",
			],
			activities=activities,
			assessment=f"Exit ticket with 3 questions about {topic} and its real-world applications",
			created_by="ai-assistant",
			created_at=created_at,
		)
