"""Service layer for LLM-backed study content generation."""

from __future__ import annotations

from .completion import CompletionClient, get_completion_client  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationError,
    ExtractionError,
    GenerationError,
    InvalidRequestError,
    JobStateError,
    PersistenceError,
    ProviderError,
    ValidationError,
)
from .requests import (  # noqa: F401
    CourseGenerationInput,
    GenerationKind,
    GenerationRequest,
    RoadmapQuestionnaire,
)

__all__ = [
    "CompletionClient",
    "ConfigurationError",
    "CourseGenerationInput",
    "ExtractionError",
    "GenerationError",
    "GenerationKind",
    "GenerationRequest",
    "InvalidRequestError",
    "JobStateError",
    "PersistenceError",
    "ProviderError",
    "RoadmapQuestionnaire",
    "ValidationError",
    "get_completion_client",
]
