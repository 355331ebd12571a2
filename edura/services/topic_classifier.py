"""Keyword heuristic deciding whether a subject is technical enough for IDE guidance."""

from __future__ import annotations

import re
from typing import FrozenSet, Optional

TECHNICAL_CATEGORIES: FrozenSet[str] = frozenset({"tech", "technology", "coding", "programming", "software"})

TECHNICAL_KEYWORDS: FrozenSet[str] = frozenset(
    {
        "algorithm",
        "algorithms",
        "android",
        "angular",
        "api",
        "apis",
        "backend",
        "bash",
        "c#",
        "c++",
        "cloud",
        "code",
        "coding",
        "css",
        "database",
        "databases",
        "devops",
        "django",
        "docker",
        "flask",
        "frontend",
        "git",
        "golang",
        "html",
        "ios",
        "java",
        "javascript",
        "js",
        "kotlin",
        "kubernetes",
        "linux",
        "node",
        "node.js",
        "php",
        "programming",
        "python",
        "react",
        "ruby",
        "rust",
        "scripting",
        "software",
        "sql",
        "swift",
        "typescript",
        "vue",
        "web",
    }
)

TECHNICAL_PHRASES: FrozenSet[str] = frozenset(
    {
        "computer science",
        "data science",
        "data structures",
        "deep learning",
        "game development",
        "machine learning",
        "mobile development",
        "web development",
    }
)

_TOKEN_PATTERN = re.compile(r"[a-z0-9][a-z0-9+#.]*")


def _tokens(text: str) -> FrozenSet[str]:
    return frozenset(token.rstrip(".") for token in _TOKEN_PATTERN.findall(text.lower()))


def is_technical_topic(topic: Optional[str], category: Optional[str] = None, *extra: Optional[str]) -> bool:
    """Return True when the topic, category or any extra text reads as a programming subject.

    Single words must match a whole token so that e.g. "Digital art history"
    does not trip on "git"; multi-word phrases match as substrings.
    """

    if category and category.strip().lower() in TECHNICAL_CATEGORIES:
        return True

    text = " ".join(part for part in (topic, *extra) if part)
    if not text.strip():
        return False

    lowered = " ".join(text.lower().split())
    if any(phrase in lowered for phrase in TECHNICAL_PHRASES):
        return True
    return not TECHNICAL_KEYWORDS.isdisjoint(_tokens(lowered))
