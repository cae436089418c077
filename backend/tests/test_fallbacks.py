import pytest

from edututor.fallbacks import EPOCH, FallbackLibrary


@pytest.fixture
def library():
    return FallbackLibrary()


def test_same_arguments_give_identical_content(library):
    assert library.explanation("Gravity", "beginner").model_dump_json() == FallbackLibrary().explanation("Gravity", "beginner").model_dump_json()
    assert library.quiz("Gravity", "beginner").model_dump_json() == FallbackLibrary().quiz("Gravity", "beginner").model_dump_json()
    assert library.lesson_plan("Gravity", "5").model_dump_json() == FallbackLibrary().lesson_plan("Gravity", "5").model_dump_json()


def test_authored_explanation_per_difficulty(library):
    beginner = library.explanation("Newton's Laws", "beginner")
    advanced = library.explanation("Newton's Laws", "advanced")
    assert beginner.content.startswith("Newton's Laws are like rules")
    assert beginner.content != advanced.content
    assert beginner.confidence == 0.95
    assert len(beginner.suggestions) == 3
    assert len(beginner.follow_up) == 2


def test_topic_lookup_ignores_case_and_spacing(library):
    assert library.explanation("  newton's   LAWS ", "intermediate").content == library.explanation("Newton's Laws", "intermediate").content


def test_unknown_topic_uses_generic_template(library):
    response = library.explanation("Plate Tectonics", "advanced")
    assert "Plate Tectonics" in response.content
    assert response.confidence == 0.5


def test_fallback_quiz_has_two_ten_point_questions(library):
    quiz = library.quiz("Plate Tectonics", "intermediate")
    assert [q.id for q in quiz.questions] == ["1", "2"]
    assert all(q.points == 10 for q in quiz.questions)
    assert quiz.time_limit == 300
    assert quiz.title == "Plate Tectonics Quiz"
    assert quiz.difficulty == "intermediate"


def test_fallback_quiz_ids_differ_by_key(library):
    assert library.quiz("Gravity", "beginner").id != library.quiz("Gravity", "advanced").id


def test_newton_quiz_uses_authored_questions(library):
    quiz = library.quiz("Newton's Laws", "beginner")
    assert quiz.questions[0].correct_answer == "Law of Inertia"


def test_lesson_plan_activity_split_for_fifty_minutes(library):
    plan = library.lesson_plan("Volcanoes", "5", duration=50, subject="Geography")
    assert [a.duration for a in plan.activities] == [10, 20, 15, 5]
    assert [a.name for a in plan.activities] == [
        "Introduction and Hook",
        "Concept Explanation",
        "Hands-on Activity",
        "Wrap-up Discussion",
    ]
    assert [a.kind for a in plan.activities] == ["presentation", "presentation", "hands-on", "discussion"]
    assert plan.title == "Volcanoes - Grade 5"
    assert plan.subject == "Geography"
    assert plan.created_at == EPOCH


def test_lesson_plan_split_floors_and_stays_positive(library):
    assert library.activity_durations(45) == [9, 18, 13, 4]
    assert library.activity_durations(3) == [1, 1, 1, 1]
