import pytest

from edura.services.course_outline import (
    ARTICLE_SEARCH_URL,
    VIDEO_SEARCH_URL,
    coerce_level,
    normalize_course_outline,
)
from edura.services.errors import ValidationError


def _parameters(**overrides):
    parameters = {
        "topic": "Medieval History",
        "goal": "Understand feudal Europe",
        "audience": "Curious adults",
        "level": "beginner",
        "duration_weeks": 2,
        "preferred_language": "English",
        "focus_area": "Storytelling",
        "include_projects": False,
        "include_ide": None,
        "category": "humanities",
    }
    parameters.update(overrides)
    return parameters


def test_bare_modules_receive_full_coverage():
    payload = {"course": {"title": "Feudal Europe", "modules": [{"title": "Castles and Lords"}]}}

    outline = normalize_course_outline(payload, _parameters())
    (module,) = outline.modules

    video = [resource for resource in module.resources if resource.type == "video"]
    reading = [resource for resource in module.resources if resource.type in ("article", "doc")]
    assert len(video) == 1 and video[0].url == VIDEO_SEARCH_URL + "Castles+and+Lords+tutorial"
    assert len(reading) == 1 and reading[0].url == ARTICLE_SEARCH_URL + "Castles+and+Lords+guide"
    assert len(module.quiz) == 1
    assert "Castles and Lords" in module.quiz[0].question
    assert module.quiz[0].correct_answer == 0
    assert module.summary == "An introduction to Castles and Lords."
    assert module.estimated_minutes == 60
    assert module.ide_setup is None


def test_existing_resources_are_kept_and_typed():
    payload = {
        "modules": [
            {
                "title": "Sources",
                "description": "Reading primary sources.",
                "resources": [
                    {"type": "YouTube", "title": "Lecture", "url": "https://example.com/v"},
                    {"type": "documentation", "title": "Archive guide"},
                    {"type": "podcast", "title": "Episode 4", "url": "https://example.com/p"},
                ],
            }
        ]
    }

    (module,) = normalize_course_outline(payload, _parameters()).modules

    assert [resource.type for resource in module.resources] == ["video", "doc", "link"]
    assert module.resources[1].url == ARTICLE_SEARCH_URL + "Archive+guide"
    assert module.summary == "Reading primary sources."


def test_key_concepts_and_topics_mirror_each_other():
    payload = {
        "modules": [
            {"title": "One", "keyConcepts": ["Vassals", "Fiefs"]},
            {"title": "Two", "topics": ["Crusades"]},
        ]
    }

    first, second = normalize_course_outline(payload, _parameters()).modules

    assert first.topics == ["Vassals", "Fiefs"]
    assert second.key_concepts == ["Crusades"]


def test_quiz_variants_are_accepted_and_invalid_items_dropped():
    question = {"question": "Who?", "options": ["A", "B"], "correct_answer": 1}
    payload = {
        "modules": [
            {"title": "Wrapped", "quiz": {"questions": [question]}},
            {"title": "Checkpoint", "checkpoint_quiz": [question, {"question": "Bad", "options": ["A"]}]},
        ]
    }

    wrapped, checkpoint = normalize_course_outline(payload, _parameters()).modules

    assert [q.question for q in wrapped.quiz] == ["Who?"]
    assert [q.question for q in checkpoint.quiz] == ["Who?"]


def test_technical_topic_gets_ide_guidance():
    payload = {"modules": [{"title": "Variables and loops"}]}

    (module,) = normalize_course_outline(payload, _parameters(topic="Python for beginners", category=None)).modules

    assert module.ide_setup is not None
    assert module.ide_setup.language == "Python"
    assert module.ide_setup.steps


def test_caller_can_opt_out_of_ide_guidance():
    payload = {
        "modules": [
            {"title": "Hooks", "ideSetup": {"editor": "WebStorm", "language": "JavaScript", "steps": ["Install"]}}
        ]
    }

    (module,) = normalize_course_outline(payload, _parameters(topic="React", include_ide=False)).modules

    assert module.ide_setup is None
    assert "ideSetup" not in module.to_dict()


def test_caller_can_force_ide_guidance_on_non_technical_topic():
    (module,) = normalize_course_outline(
        {"modules": [{"title": "Chord shapes"}]}, _parameters(topic="Guitar", include_ide=True)
    ).modules

    assert module.ide_setup is not None


def test_course_fields_fall_back_to_request_parameters():
    outline = normalize_course_outline({"modules": [{"title": "Intro"}]}, _parameters(level="advanced"))

    assert outline.title == "Medieval History: Complete Course"
    assert outline.description == "Understand feudal Europe"
    assert outline.level == "advanced"
    assert outline.language == "English"


def test_modules_without_titles_are_dropped_and_renumbered():
    payload = {"modules": [{"summary": "untitled"}, {"title": "Kept", "moduleNumber": 7}]}

    (module,) = normalize_course_outline(payload, _parameters()).modules

    assert module.module_number == 1


def test_course_without_modules_raises():
    with pytest.raises(ValidationError):
        normalize_course_outline({"title": "Empty", "modules": []}, _parameters())


@pytest.mark.parametrize("value, expected", [("Expert", "advanced"), ("medium", "intermediate"), ("???", "beginner")])
def test_course_level_is_coerced(value, expected):
    assert coerce_level(value) == expected


def test_course_normalization_is_idempotent():
    payload = {
        "title": "Web Basics",
        "tags": ["web"],
        "outcomes": ["Build a page"],
        "projects": [{"title": "Portfolio", "difficulty": "hard"}],
        "modules": [
            {
                "title": "HTML",
                "topics": ["Tags"],
                "flashcards": [{"front": "<p>", "back": "Paragraph"}],
                "practiceTasks": ["Write a page", {"title": "Add a list", "difficulty": "easy"}],
                "estimatedMinutes": 45,
            }
        ],
    }
    parameters = _parameters(topic="Web development", category="tech")

    outline = normalize_course_outline(payload, parameters)

    assert normalize_course_outline(outline.to_dict(), parameters) == outline


@pytest.mark.parametrize("value", [3, 2.5, {"title": "Intro"}, "Intro"])
def test_non_list_modules_raise_validation_error(value):
    with pytest.raises(ValidationError):
        normalize_course_outline({"title": "T", "modules": value}, _parameters())


def test_non_list_module_fields_are_treated_as_empty():
    payload = {
        "modules": [
            {
                "title": "Castles",
                "flashcards": 5,
                "quiz": 9,
                "resources": 1.5,
                "practiceTasks": {"title": "Draw a keep"},
                "ideTasks": 4,
            }
        ]
    }

    (module,) = normalize_course_outline(payload, _parameters()).modules

    assert module.flashcards == []
    assert module.practice_tasks == []
    assert module.ide_tasks == []
    assert len(module.quiz) == 1
    assert {resource.type for resource in module.resources} == {"video", "article"}


def test_course_extras_are_normalized():
    payload = {
        "modules": [{"title": "Castles"}],
        "final_test": {
            "questions": [
                {"question": "When?", "options": [1066, 1215], "correct_answer": 0},
                {"question": "Broken", "options": ["Only"], "correct_answer": 0},
            ]
        },
        "revision_plan": {"weekly_reviews": [{"week": "2", "topics": ["Castles"]}, {"topics": []}, {"topics": "Lords"}]},
        "progress_curve": "  Steady  ",
        "motivational_tips": ["Keep going", "", 3],
    }

    outline = normalize_course_outline(payload, _parameters())

    assert [question.options for question in outline.final_test] == [["1066", "1215"]]
    assert [review.to_dict() for review in outline.revision_plan] == [
        {"week": 2, "topics": ["Castles"]},
        {"week": 2, "topics": ["Lords"]},
    ]
    assert outline.progress_curve == "Steady"
    assert outline.motivational_tips == ["Keep going", "3"]


def test_course_extras_survive_renormalization():
    payload = {
        "modules": [
            {
                "title": "Functions",
                "ide_tasks": [
                    {
                        "problem_statement": "Write add(a, b)",
                        "starter_code": "def add(a, b):\n    pass",
                        "test_cases": [{"input": "1, 2", "expected_output": 3}, {"input": "no output"}],
                        "difficulty": "beginner",
                        "time_estimate": "15",
                    },
                    {"starter_code": "untitled"},
                ],
            }
        ],
        "finalTest": [{"question": "Q", "options": ["A", "B"], "correctAnswer": 1}],
        "revisionPlan": [{"week": 1, "topics": ["Functions"]}],
        "motivationalTips": "Practice daily",
    }
    parameters = _parameters(topic="Python", include_ide=True)

    outline = normalize_course_outline(payload, parameters)
    (task,) = outline.modules[0].ide_tasks

    assert task.difficulty == "easy"
    assert task.time_estimate == 15
    assert [case.to_dict() for case in task.test_cases] == [{"input": "1, 2", "expectedOutput": "3"}]
    assert normalize_course_outline(outline.to_dict(), parameters) == outline


def test_opting_out_of_ide_guidance_drops_ide_tasks():
    payload = {"modules": [{"title": "Hooks", "ideTasks": [{"problemStatement": "Build a counter"}]}]}

    (module,) = normalize_course_outline(payload, _parameters(topic="React", include_ide=False)).modules

    assert module.ide_tasks == []
