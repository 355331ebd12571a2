import pytest

from edura.services.errors import ValidationError
from edura.services.extraction import extract_json
from edura.services.normalization import (
    coerce_difficulty,
    normalize_detailed_roadmap,
    normalize_flashcards,
    normalize_quiz,
    normalize_roadmap,
)


QUESTIONNAIRE = {
    "topic": "Python",
    "skill_level": "beginner",
    "duration": 2,
    "duration_unit": "weeks",
    "hours_per_day": None,
    "hours_per_week": 6,
}


def test_fenced_flashcards_are_extracted_and_trimmed():
    raw = '```json\n[{"question":" What does photosynthesis convert? ","answer":"Light into chemical energy  "}]\n```'

    cards = normalize_flashcards(extract_json(raw, "array"))

    assert [card.to_dict() for card in cards] == [
        {"question": "What does photosynthesis convert?", "answer": "Light into chemical energy"}
    ]


def test_flashcards_accept_wrapped_payloads_and_aliases():
    payload = {
        "flashcards": [
            {"front": "Mitochondria", "back": "Powerhouse of the cell"},
            {"term": "Osmosis", "definition": "Diffusion of water"},
            {"question": "Missing answer"},
            "not a card",
        ]
    }

    cards = normalize_flashcards(payload)

    assert [card.question for card in cards] == ["Mitochondria", "Osmosis"]


def test_empty_flashcard_result_is_rejected():
    with pytest.raises(ValidationError):
        normalize_flashcards([{"question": "", "answer": ""}])


def test_quiz_accepts_snake_case_correct_answer():
    payload = [
        {
            "question": "Which planet is largest?",
            "options": ["Mars", "Venus", "Jupiter", "Mercury"],
            "correct_answer": 2,
        }
    ]

    (question,) = normalize_quiz(payload)

    assert question.to_dict() == {
        "question": "Which planet is largest?",
        "options": ["Mars", "Venus", "Jupiter", "Mercury"],
        "correctAnswer": 2,
        "explanation": "",
    }


def test_quiz_drops_items_that_break_answer_rules():
    payload = [
        {"question": "One option", "options": ["Only"], "correctAnswer": 0},
        {"question": "Out of range", "options": ["A", "B"], "correctAnswer": 2},
        {"question": "Negative", "options": ["A", "B"], "correctAnswer": -1},
        {"question": "Boolean", "options": ["A", "B"], "correctAnswer": True},
        {"question": "Missing", "options": ["A", "B"]},
        {"question": "Blank option", "options": ["A", " "], "correctAnswer": 0},
        {"question": "Numeric string", "options": ["A", "B", "C"], "correctAnswer": "1"},
        {"question": "Float index", "options": ["A", "B", "C"], "correctAnswer": 2.0},
    ]

    questions = normalize_quiz(payload)

    assert [question.question for question in questions] == ["Numeric string", "Float index"]
    for question in questions:
        assert len(question.options) >= 2
        assert 0 <= question.correct_answer < len(question.options)


def test_quiz_with_no_valid_items_raises():
    with pytest.raises(ValidationError):
        normalize_quiz([{"question": "Broken", "options": ["A"], "correctAnswer": 0}])


@pytest.mark.parametrize(
    "value, expected",
    [
        ("easy", "easy"),
        ("HARD", "hard"),
        ("Intermediate", "medium"),
        ("advanced", "hard"),
        ("legendary", "medium"),
        (None, "medium"),
        (3, "medium"),
    ],
)
def test_difficulty_is_clamped(value, expected):
    assert coerce_difficulty(value) == expected


def test_roadmap_milestones_get_defaults_and_are_never_completed():
    payload = [
        {"title": "Basics", "difficulty": "easy", "estimatedHours": 4, "completed": True},
        {"id": "custom", "title": "Projects", "estimatedHours": "lots", "completed": "yes"},
        {"description": "No title, dropped"},
    ]

    milestones = normalize_roadmap(payload)

    assert [m.id for m in milestones] == ["1", "custom"]
    assert [m.estimated_hours for m in milestones] == [4, 10]
    assert [m.difficulty for m in milestones] == ["easy", "medium"]
    assert all(m.to_dict()["completed"] is False for m in milestones)


def test_detailed_roadmap_fills_defaults():
    payload = {
        "stages": [
            {"title": "Syntax", "completed": True, "resources": [{"type": "YouTube", "title": "Intro"}]},
            {"title": "Functions", "estimatedHours": 0, "difficulty": "hard"},
        ]
    }

    roadmap = normalize_detailed_roadmap(payload, QUESTIONNAIRE)
    data = roadmap.to_dict()

    assert data["title"] == "Learning Roadmap: Python"
    assert data["userSummary"] == {
        "skill": "Python",
        "level": "beginner",
        "timeline": "2 weeks",
        "commitment": "6 hours per week",
    }
    assert [stage["stage"] for stage in data["stages"]] == ["Week 1", "Week 2"]
    assert [stage["id"] for stage in data["stages"]] == ["1", "2"]
    assert [stage["estimatedHours"] for stage in data["stages"]] == [5, 5]
    assert all(stage["completed"] is False for stage in data["stages"])
    assert data["stages"][0]["resources"] == [{"type": "video", "title": "Intro"}]
    assert data["stages"][1]["topics"] == []
    assert data["stages"][1]["exercises"] == []
    assert data["stages"][1]["projects"] == []
    assert data["finalProject"]["complexity"] == "medium"
    assert data["resourceList"] == []


def test_detailed_roadmap_uses_day_labels_for_day_timelines():
    parameters = dict(QUESTIONNAIRE, duration=3, duration_unit="days", hours_per_day=2, hours_per_week=None)

    roadmap = normalize_detailed_roadmap({"stages": [{"title": "Warm up"}]}, parameters)

    assert roadmap.stages[0].stage == "Day 1"


def test_detailed_roadmap_without_stages_raises():
    with pytest.raises(ValidationError):
        normalize_detailed_roadmap({"title": "Empty", "stages": []}, QUESTIONNAIRE)


def test_normalization_is_idempotent():
    flashcards = normalize_flashcards([{"question": " Q ", "answer": " A "}])
    assert normalize_flashcards([card.to_dict() for card in flashcards]) == flashcards

    quiz = normalize_quiz([{"question": "Q", "options": ["A", "B"], "correct_answer": "1"}])
    assert normalize_quiz([question.to_dict() for question in quiz]) == quiz

    milestones = normalize_roadmap([{"title": "T", "difficulty": "expert", "estimatedHours": 2.5}])
    assert normalize_roadmap([milestone.to_dict() for milestone in milestones]) == milestones

    roadmap = normalize_detailed_roadmap(
        {
            "stages": [{"title": "S", "resources": [{"title": "Docs", "type": "docs", "url": "https://docs.python.org"}]}],
            "resourceList": [{"category": "Docs", "items": [{"title": "Tutorial"}, {"url": "no title"}]}],
        },
        QUESTIONNAIRE,
    )
    assert normalize_detailed_roadmap(roadmap.to_dict(), QUESTIONNAIRE) == roadmap


def test_numeric_quiz_options_are_kept_as_text():
    (question,) = normalize_quiz([{"question": "2+2?", "options": [3, 4, 5.5, 6.0], "correctAnswer": 1}])

    assert question.options == ["3", "4", "5.5", "6"]
    assert question.correct_answer == 1


def test_numeric_flashcard_answers_are_kept_as_text():
    (card,) = normalize_flashcards([{"question": "How many sides does a hexagon have?", "answer": 6}])

    assert card.answer == "6"


def test_boolean_values_are_not_treated_as_text():
    with pytest.raises(ValidationError):
        normalize_flashcards([{"question": "Is water wet?", "answer": True}])


@pytest.mark.parametrize("value", [7, 2.5, {"title": "Tutorial"}, "Tutorial"])
def test_resource_categories_with_non_list_items_are_dropped(value):
    roadmap = normalize_detailed_roadmap(
        {"stages": [{"title": "Basics"}], "resourceList": [{"category": "Docs", "items": value}]},
        QUESTIONNAIRE,
    )

    assert roadmap.resource_list == []


@pytest.mark.parametrize("value", [3, 4.5, {"title": "Basics"}, "Basics"])
def test_non_list_stages_raise_validation_error(value):
    with pytest.raises(ValidationError):
        normalize_detailed_roadmap({"stages": value}, QUESTIONNAIRE)
