from __future__ import annotations

from typing import Optional


_REGISTER_BY_DIFFICULTY = {
	"beginner": "Use simple vocabulary, short sentences and everyday analogies. Avoid jargon; define any term you must use.",
	"advanced": "Go into technical depth. Use precise terminology, formal definitions and, where relevant, the underlying mathematics.",
}
_DEFAULT_REGISTER = "Use a moderate level of detail and explain each idea with a concrete example."


def build_explanation_prompt(topic: str, difficulty: str, language: str, grade_level: Optional[str] = None) -> str:
	register = _REGISTER_BY_DIFFICULTY.get(difficulty, _DEFAULT_REGISTER)
	audience = f"a grade {grade_level} student" if grade_level else "a student"
	return (
		"You are a patient, encouraging tutor.\n"
		f"Explain the topic \"{topic}\" to {audience} at the {difficulty} level.\n"
		f"{register}\n"
		"Structure: a one-sentence summary, the core idea, one worked example, and a short recap.\n"
		f"Respond in the language with code \"{language}\".\n"
		"Do not include quizzes or follow-up questions in your answer."
	)


def build_quiz_prompt(topic: str, difficulty: str, question_count: int) -> str:
	return (
		f"You are an assessment item writer. Create {question_count} multiple-choice questions about \"{topic}\" "
		f"at the {difficulty} level.\n"
		"Each question must have exactly 4 options with exactly one correct option.\n"
		"correctAnswer must repeat the text of the correct option verbatim.\n"
		"Output STRICTLY JSON, no markdown, no commentary.\n\n"
		"JSON schema to return exactly:\n"
		"{\n"
		"  \"questions\": [\n"
		"    {\n"
		"      \"question\": string,\n"
		"      \"options\": [string, string, string, string],\n"
		"      \"correctAnswer\": string,\n"
		"      \"explanation\": string (1-2 sentences)\n"
		"    }\n"
		"  ]\n"
		"}"
	)


def build_lesson_plan_prompt(topic: str, grade: str, duration: int, subject: str) -> str:
	return (
		"You are an experienced teacher writing a lesson plan for a colleague.\n"
		f"Subject: {subject}\n"
		f"Topic: {topic}\n"
		f"Grade: {grade}\n"
		f"Total duration: {duration} minutes\n\n"
		"Include these sections with headings:\n"
		"- Learning objectives (3 bullet points starting with \"Students will\")\n"
		"- Materials\n"
		f"- Activities, each with a name, a short description and a duration in minutes; durations must add up to at most {duration}\n"
		"- Assessment (how understanding is checked at the end of the lesson)\n"
		"Keep it concise and practical."
	)
