"""Exception taxonomy shared by every stage of the generation pipeline."""

from __future__ import annotations

from typing import Optional


class GenerationError(RuntimeError):
    """Base class for failures raised while producing study content."""


class InvalidRequestError(GenerationError):
    """Raised when caller-supplied parameters are rejected before any work starts."""


class ConfigurationError(GenerationError):
    """Raised when the completion credential is missing or rejected."""


class ProviderError(GenerationError):
    """Raised when the completion call itself fails."""

    def __init__(self, message: str, *, provider_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider_message = provider_message or message


class ExtractionError(GenerationError):
    """Raised when no parseable structured payload is found in a response."""


class ValidationError(GenerationError):
    """Raised when a parsed payload fails shape checks or normalizes to nothing."""


class PersistenceError(GenerationError):
    """Raised when the datastore rejects a write."""

    def __init__(self, message: str, *, issue: str = "unknown", code: Optional[str] = None) -> None:
        super().__init__(message)
        self.issue = issue
        self.code = code


class JobStateError(GenerationError):
    """Raised when a generation job is asked to leave a terminal state."""
