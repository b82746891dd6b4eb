"""
Inference Errors
================

Failure taxonomy for a single inference invocation. Every error carries a
stable ``kind`` string so the API and the dashboard can report it without
inspecting the class.
"""

from typing import List, Optional

from config import MissingCredentialError


class InferenceError(Exception):
    """Base class for failures local to one pipeline invocation."""

    kind = "inference_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportFailure(InferenceError):
    """Service unreachable, timed out, or answered with a non-2xx status."""

    kind = "transport_failure"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        """Whether retrying the same request may succeed."""
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


class AuthenticationFailure(TransportFailure):
    """The service rejected the credential."""

    kind = "authentication_failure"

    @property
    def is_transient(self) -> bool:
        return False


class EmptyResponse(InferenceError):
    """The service answered but returned no text."""

    kind = "empty_response"


class MalformedResponse(InferenceError):
    """Text was returned but it is not a JSON document."""

    kind = "malformed_response"


class SchemaViolation(InferenceError):
    """Valid JSON that does not conform to the declared output schema."""

    kind = "schema_violation"

    def __init__(self, message: str, violations: Optional[List[str]] = None):
        super().__init__(message)
        self.violations = violations or []


class PipelineBusy(RuntimeError):
    """A request is already in flight and the orchestrator rejects overlaps."""


class PipelineClosed(RuntimeError):
    """The orchestrator was closed and accepts no further invocations."""


__all__ = [
    "InferenceError",
    "TransportFailure",
    "AuthenticationFailure",
    "EmptyResponse",
    "MalformedResponse",
    "SchemaViolation",
    "PipelineBusy",
    "PipelineClosed",
    "MissingCredentialError",
]
