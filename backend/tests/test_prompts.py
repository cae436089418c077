from edututor.prompts import build_explanation_prompt, build_lesson_plan_prompt, build_quiz_prompt


def test_explanation_prompt_embeds_all_inputs():
    prompt = build_explanation_prompt("Photosynthesis", "intermediate", "es", "6")
    for part in ("Photosynthesis", "intermediate", "es", "grade 6"):
        assert part in prompt


def test_explanation_register_follows_difficulty():
    beginner = build_explanation_prompt("Gravity", "beginner", "en")
    advanced = build_explanation_prompt("Gravity", "advanced", "en")
    moderate = build_explanation_prompt("Gravity", "intermediate", "en")
    assert "simple vocabulary" in beginner
    assert "technical depth" in advanced
    assert "concrete example" in moderate
    assert "grade" not in moderate


def test_quiz_prompt_requests_strict_json_schema():
    prompt = build_quiz_prompt("Fractions", "beginner", 7)
    for part in ("Fractions", "beginner", "7", '"questions"', '"options"', '"correctAnswer"', '"explanation"'):
        assert part in prompt
    assert "STRICTLY JSON" in prompt


def test_lesson_plan_prompt_embeds_all_inputs():
    prompt = build_lesson_plan_prompt("Volcanoes", "5", 50, "Geography")
    for part in ("Volcanoes", "Grade: 5", "50 minutes", "Geography", "objectives", "Materials", "Activities", "Assessment"):
        assert part in prompt
