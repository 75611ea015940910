"""
Failure taxonomy for the idea pipeline.

Every failure carries a machine-readable ``kind``, a short human-readable
message and an optional ``detail`` payload for diagnostics (raw model
text, the parsed-but-invalid structure, the offending id, ...).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class IdeaProcessorError(Exception):
    kind = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "error": self.kind,
            "message": self.message,
        }
        if self.detail:
            payload["detail"] = self.detail
        return payload


class ValidationError(IdeaProcessorError):
    """Malformed or missing caller input. Never reaches the model."""

    kind = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(IdeaProcessorError):
    kind = "NOT_FOUND"
    status_code = 404

    def __init__(self, idea_id: str):
        super().__init__("Idea not found", {"id": idea_id})
        self.idea_id = idea_id


class AiUnavailableError(IdeaProcessorError):
    """The gateway call failed, timed out or returned nothing usable."""

    kind = "AI_UNAVAILABLE"
    status_code = 503


class AiParseError(IdeaProcessorError):
    """Model text could not be decoded as JSON."""

    kind = "AI_PARSE_ERROR"
    status_code = 502

    def __init__(self, message: str, raw_response: str):
        super().__init__(message, {"rawResponse": raw_response})
        self.raw_response = raw_response


class ResponseValidationError(IdeaProcessorError):
    """Model text decoded fine but does not match the artifact shape."""

    kind = "RESPONSE_VALIDATION_ERROR"
    status_code = 502

    def __init__(self, message: str, response: Any, issues: List["ShapeIssue"]):
        super().__init__(
            message,
            {
                "response": response,
                "issues": [issue.to_dict() for issue in issues],
            },
        )
        self.response = response
        self.issues = issues


class PersistenceError(IdeaProcessorError):
    kind = "PERSISTENCE_ERROR"
    status_code = 500


# ============================================================
# SHAPE CHECK RESULTS
# ============================================================

@dataclass
class ShapeIssue:
    location: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"location": self.location, "message": self.message}


@dataclass
class ShapeResult:
    is_valid: bool
    issues: List[ShapeIssue] = field(default_factory=list)

    @classmethod
    def success(cls):
        return cls(is_valid=True, issues=[])

    @classmethod
    def failure(cls, issues: List[ShapeIssue]):
        return cls(is_valid=False, issues=issues)
