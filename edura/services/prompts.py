"""Prompt construction for every generation kind.

Each builder is a pure function of its parameters: it states the task, spells
out every parameter value and embeds a literal example of the JSON shape the
normalizers expect. Parameter validation happens before these are called.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Mapping, Tuple

from .requests import GenerationKind

DEFAULT_ITEM_COUNT = 10
DEFAULT_HOURS_PER_DAY = 2
DEFAULT_HOURS_PER_WEEK = 10
WEEKS_PER_MONTH = 4

DIFFICULTY_ENUM = "easy|medium|hard"
STAGE_RESOURCE_ENUM = "video|documentation|practice|article"
COURSE_RESOURCE_ENUM = "video|article|doc|practice"


def build_prompt(kind: GenerationKind, parameters: Mapping[str, Any]) -> str:
    """Return the prompt text for ``kind`` filled in with ``parameters``."""

    builder = _BUILDERS[GenerationKind(kind)]
    return builder(parameters)


def _schema(example: Any) -> str:
    return json.dumps(example, ensure_ascii=False, indent=2)


def _count(parameters: Mapping[str, Any]) -> int:
    value = parameters.get("count")
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return DEFAULT_ITEM_COUNT


def _chat_prompt(parameters: Mapping[str, Any]) -> str:
    lines: List[str] = []
    for message in parameters.get("messages") or []:
        role = "User" if message.get("role") == "user" else "Assistant"
        lines.append(f"{role}: {message.get('content', '')}")
    return "\n\n".join(lines) + "\n\nAssistant:"


def _summary_prompt(parameters: Mapping[str, Any]) -> str:
    return (
        "Please provide a concise summary of the following content. Focus on key points, "
        "main concepts, and important information. Format the response with clear sections "
        "using markdown:\n\n"
        f"{parameters.get('content', '')}"
    )


def _flashcards_prompt(parameters: Mapping[str, Any]) -> str:
    example = [
        {"question": "...", "answer": "..."},
        {"question": "...", "answer": "..."},
    ]
    return (
        f"Based on the following content, generate {_count(parameters)} flashcards in JSON format. "
        'Each flashcard should have a "question" and "answer" field. Return only valid JSON array:\n\n'
        f"Content:\n{parameters.get('content', '')}\n\n"
        f"Format:\n{_schema(example)}"
    )


def _quiz_prompt(parameters: Mapping[str, Any]) -> str:
    example = [
        {
            "question": "...",
            "options": ["...", "...", "...", "..."],
            "correctAnswer": 0,
            "explanation": "...",
        }
    ]
    return (
        f"Based on the following content, generate {_count(parameters)} multiple-choice quiz questions "
        "in JSON format. Each question should have:\n"
        '- "question": the question text\n'
        '- "options": array of 4 answer options\n'
        '- "correctAnswer": index of correct answer (0-3)\n'
        '- "explanation": brief explanation\n\n'
        "Return only valid JSON array:\n\n"
        f"Content:\n{parameters.get('content', '')}\n\n"
        f"Format:\n{_schema(example)}"
    )


def _roadmap_prompt(parameters: Mapping[str, Any]) -> str:
    example = [
        {
            "id": "1",
            "title": "...",
            "description": "...",
            "difficulty": DIFFICULTY_ENUM,
            "estimatedHours": 10,
            "completed": False,
        }
    ]
    return (
        "Create a structured learning roadmap for the following goal. Break it down into 5-8 "
        "milestones with:\n"
        "- Clear, actionable titles\n"
        "- Detailed descriptions\n"
        "- Difficulty level (easy, medium, or hard)\n"
        "- Estimated hours to complete\n\n"
        f"Goal: {parameters.get('goal', '')}\n\n"
        f"Return a JSON array with this structure:\n{_schema(example)}"
    )


def commitment_text(parameters: Mapping[str, Any]) -> str:
    if parameters.get("hours_per_day"):
        return f"{parameters['hours_per_day']:g} hours per day"
    if parameters.get("hours_per_week"):
        return f"{parameters['hours_per_week']:g} hours per week"
    return "flexible schedule"


def stage_plan(parameters: Mapping[str, Any]) -> Tuple[str, int, float]:
    """Return ``(stage type, number of stages, total hours)`` for a questionnaire."""

    duration = parameters.get("duration") or 1
    unit = parameters.get("duration_unit") or "weeks"
    per_day = parameters.get("hours_per_day") or DEFAULT_HOURS_PER_DAY
    per_week = parameters.get("hours_per_week") or DEFAULT_HOURS_PER_WEEK

    if unit == "days":
        return "Day", duration, duration * per_day
    if unit == "weeks":
        return "Week", duration, duration * per_week
    return "Week", duration * WEEKS_PER_MONTH, duration * WEEKS_PER_MONTH * per_week


_LEVEL_PROJECTS = {
    "beginner": "Simple projects",
    "intermediate": "Real-world projects",
    "advanced": "Advanced projects and optimization",
}

_LEVEL_ADAPTATION = {
    "beginner": "Include fundamentals, basics, and simple projects. Start from the very beginning.",
    "intermediate": "Skip basics, focus on real-world skills, practical applications, and intermediate concepts.",
    "advanced": "Focus on advanced frameworks, optimization techniques, best practices, and include a capstone project.",
}


def _detailed_roadmap_prompt(parameters: Mapping[str, Any]) -> str:
    topic = parameters.get("topic", "")
    level = parameters.get("skill_level") or "beginner"
    duration = parameters.get("duration")
    unit = parameters.get("duration_unit") or "weeks"
    commitment = commitment_text(parameters)
    stage_type, num_stages, total_hours = stage_plan(parameters)

    if unit == "days" or total_hours < 50:
        timeline_note = "Compress content but keep it achievable. Focus on essentials."
    else:
        timeline_note = "Expand with deeper learning, more practice, and comprehensive coverage."

    example = {
        "title": f"Learning Roadmap: {topic}",
        "userSummary": {
            "skill": topic,
            "level": level,
            "timeline": f"{duration} {unit}",
            "commitment": commitment,
        },
        "stages": [
            {
                "id": "1",
                "stage": f"{stage_type} 1",
                "title": "...",
                "description": "...",
                "topics": ["topic1", "topic2"],
                "exercises": ["exercise1", "exercise2"],
                "projects": ["project1"],
                "resources": [
                    {
                        "type": STAGE_RESOURCE_ENUM,
                        "title": "...",
                        "url": "...",
                        "description": "...",
                    }
                ],
                "difficulty": DIFFICULTY_ENUM,
                "estimatedHours": 5,
                "completed": False,
            }
        ],
        "finalProject": {
            "title": "...",
            "description": "...",
            "requirements": ["req1", "req2"],
            "complexity": DIFFICULTY_ENUM,
        },
        "resourceList": [
            {
                "category": "Videos",
                "items": [{"title": "...", "url": "...", "description": "..."}],
            }
        ],
    }

    return (
        "You are an expert learning path designer. Create a detailed, personalized learning roadmap "
        "based on the following information:\n\n"
        f"**Topic/Skill:** {topic}\n"
        f"**Current Skill Level:** {level}\n"
        f"**Timeline:** {duration} {unit}\n"
        f"**Time Commitment:** {commitment}\n"
        f"**Total Estimated Hours:** {total_hours:g} hours\n\n"
        "**Requirements:**\n"
        f"1. Break the roadmap into {num_stages} {stage_type.lower()}s ({stage_type} 1, {stage_type} 2, etc.)\n"
        "2. Each stage should include:\n"
        "   - Clear title and description\n"
        "   - Specific topics to learn\n"
        "   - Practical exercises\n"
        f"   - {_LEVEL_PROJECTS.get(level, _LEVEL_PROJECTS['beginner'])}\n"
        "   - Recommended resources (videos, documentation, practice sites)\n"
        "   - Difficulty progression (easy -> medium -> hard)\n"
        "   - Estimated hours that fit within the time commitment\n\n"
        "3. Adapt content based on skill level:\n"
        f"   - {_LEVEL_ADAPTATION.get(level, _LEVEL_ADAPTATION['beginner'])}\n\n"
        "4. Adapt timeline:\n"
        f"   - {timeline_note}\n\n"
        "5. Include a final project/portfolio suggestion that demonstrates mastery\n\n"
        "6. Provide a comprehensive resource list organized by category\n\n"
        f"Return a JSON object with this exact structure:\n{_schema(example)}\n\n"
        "Make sure:\n"
        f"- The roadmap fits exactly within {duration} {unit}\n"
        "- Each stage's estimated hours align with the time commitment\n"
        "- Difficulty progresses naturally from easy to hard\n"
        "- Resources are relevant and helpful\n"
        "- The final project is appropriate for the skill level\n"
        "- Return ONLY valid JSON, no markdown, no code blocks"
    )


def _course_prompt(parameters: Mapping[str, Any]) -> str:
    topic = parameters.get("topic", "")
    level = parameters.get("level") or "beginner"
    weeks = parameters.get("duration_weeks")
    language = parameters.get("preferred_language") or "English"
    include_projects = bool(parameters.get("include_projects"))
    include_ide = parameters.get("include_ide")

    module_example: Dict[str, Any] = {
        "moduleNumber": 1,
        "title": "...",
        "summary": "...",
        "keyConcepts": ["concept1", "concept2"],
        "topics": ["topic1", "topic2"],
        "examples": ["example1"],
        "flashcards": [{"question": "...", "answer": "..."}],
        "practiceTasks": [{"title": "...", "description": "...", "difficulty": DIFFICULTY_ENUM}],
        "quiz": [
            {
                "question": "...",
                "options": ["...", "...", "...", "..."],
                "correctAnswer": 0,
                "explanation": "...",
            }
        ],
        "resources": [
            {"type": COURSE_RESOURCE_ENUM, "title": "...", "url": "...", "description": "..."}
        ],
        "estimatedMinutes": 60,
    }
    if include_ide:
        module_example["ideSetup"] = {
            "editor": "...",
            "language": "...",
            "steps": ["step1", "step2"],
        }
        module_example["ideTasks"] = [
            {
                "problemStatement": "...",
                "starterCode": "...",
                "expectedOutput": "...",
                "testCases": [{"input": "...", "expectedOutput": "..."}],
                "difficulty": DIFFICULTY_ENUM,
                "hints": ["hint1", "hint2"],
                "timeEstimate": 30,
            }
        ]

    example: Dict[str, Any] = {
        "course": {
            "title": "...",
            "description": "...",
            "level": level,
            "language": language,
            "tags": ["tag1", "tag2"],
            "outcomes": ["outcome1", "outcome2"],
            "modules": [module_example],
            "revisionPlan": {"weeklyReviews": [{"week": 1, "topics": ["topic1", "topic2"]}]},
            "finalTest": {
                "questions": [
                    {
                        "question": "...",
                        "options": ["...", "...", "...", "..."],
                        "correctAnswer": 0,
                        "explanation": "...",
                    }
                ]
            },
            "progressCurve": "Description of difficulty progression...",
            "motivationalTips": ["tip1", "tip2"],
        }
    }
    if include_projects:
        example["course"]["projects"] = [
            {
                "title": "...",
                "description": "...",
                "requirements": ["req1", "req2"],
                "complexity": DIFFICULTY_ENUM,
            }
        ]

    extras = [
        "- A weekly revision plan listing the topics to review each week",
        "- An end-of-course test of 20-30 multiple-choice questions",
        "- A short description of how the difficulty progresses (progress curve)",
        "- 5-7 motivational tips",
    ]
    if include_projects:
        extras.append("- Mini projects (2-4) that apply the material end to end")
    if include_ide:
        extras.append(
            "- An ideSetup block per module: recommended editor, language and setup steps"
        )
        extras.append(
            "- ideTasks per module: coding exercises with starter code, expected output, "
            "test cases, hints and a time estimate in minutes"
        )
    elif include_ide is None:
        extras.append(
            "- Only if this is a programming or technology subject: IDE setup steps and "
            "coding exercises for each module"
        )
    if include_ide is None:
        ide_label = "auto (only for programming or technology subjects)"
    else:
        ide_label = "yes" if include_ide else "no"
    extras_text = "\n" + "\n".join(extras)

    return (
        "You are the Edura Course Architect. Generate a COMPLETE course based on the following "
        "learner inputs:\n\n"
        f"**Topic:** {topic}\n"
        f"**Learning Goal:** {parameters.get('goal', '')}\n"
        f"**Audience:** {parameters.get('audience', '')}\n"
        f"**Level:** {level}\n"
        f"**Duration:** {weeks} weeks\n"
        f"**Preferred Language:** {language}\n"
        f"**Focus Area:** {parameters.get('focus_area', '')}\n"
        f"**Category:** {parameters.get('category') or 'General'}\n"
        f"**Include Projects:** {'yes' if include_projects else 'no'}\n"
        f"**Include IDE Guidance:** {ide_label}\n\n"
        "THE COURSE MUST INCLUDE:\n"
        "- An engaging title and a clear description\n"
        "- 5-8 specific learning outcomes\n"
        "- One module per week, each with a 2-3 sentence summary, key concepts, topics, practical "
        "examples, 5-10 flashcards, 3-5 practice tasks, a 3-5 question checkpoint quiz, estimated "
        "minutes and resources (at least one video and one article or doc)"
        f"{extras_text}\n\n"
        f"Write every text field in {language}.\n\n"
        f"Format STRICTLY as valid JSON (no markdown, no code blocks):\n{_schema(example)}\n\n"
        "Make sure:\n"
        f"- The course fits within {weeks} weeks\n"
        f"- Content is appropriate for the {level} level\n"
        "- correctAnswer is the zero-based index of the right option\n"
        "- Return ONLY JSON"
    )


_BUILDERS: Dict[GenerationKind, Callable[[Mapping[str, Any]], str]] = {
    GenerationKind.CHAT: _chat_prompt,
    GenerationKind.SUMMARY: _summary_prompt,
    GenerationKind.FLASHCARDS: _flashcards_prompt,
    GenerationKind.QUIZ: _quiz_prompt,
    GenerationKind.ROADMAP: _roadmap_prompt,
    GenerationKind.DETAILED_ROADMAP: _detailed_roadmap_prompt,
    GenerationKind.COURSE: _course_prompt,
}
