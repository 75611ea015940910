import json
import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from idea_processor.errors import (
    AiParseError,
    ResponseValidationError,
    ShapeIssue,
    ShapeResult,
)
from idea_processor.schemas import DevPrompt, IdeaMap, MvpPlan, TechStack

logger = logging.getLogger(__name__)


class ArtifactKind(Enum):
    IDEA_MAP = "idea-map"
    TECH_STACK = "tech-stack"
    MVP = "mvp"
    DEV_PROMPT = "dev-prompt"


_ADAPTERS: Dict[ArtifactKind, TypeAdapter] = {
    ArtifactKind.IDEA_MAP: TypeAdapter(IdeaMap),
    ArtifactKind.TECH_STACK: TypeAdapter(TechStack),
    ArtifactKind.MVP: TypeAdapter(MvpPlan),
    ArtifactKind.DEV_PROMPT: TypeAdapter(DevPrompt),
}

# Tech stack is the only top-level array
_ARRAY_KINDS = {ArtifactKind.TECH_STACK}


# ============================================================
# DECODE (LLM TRUST BOUNDARY)
# ============================================================

def load_json(text: str, kind: ArtifactKind) -> Any:
    """
    Decode model text as JSON.

    Strategy:
    1. Try direct json.loads (fast path)
    2. Fallback to the outermost object (or array, for array kinds)
       embedded in surrounding prose

    Raises ValueError when neither yields JSON.
    """
    if not text or not isinstance(text, str):
        raise ValueError("empty model output")

    # Fast path
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        first_error = e

    pattern = r"\[.*\]" if kind in _ARRAY_KINDS else r"\{.*\}"
    match = re.search(pattern, text, re.DOTALL)
    if not match:
        raise ValueError(str(first_error))

    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        raise ValueError(str(first_error))


# ============================================================
# SHAPE CHECK
# ============================================================

def _issues_from(error: PydanticValidationError) -> List[ShapeIssue]:
    issues = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "$"
        issues.append(ShapeIssue(location=location, message=err.get("msg", "invalid")))
    return issues


def check_shape(data: Any, kind: ArtifactKind) -> ShapeResult:
    try:
        _ADAPTERS[kind].validate_python(data)
    except PydanticValidationError as e:
        return ShapeResult.failure(_issues_from(e))
    return ShapeResult.success()


def parse_and_validate(
    sanitized: str,
    kind: ArtifactKind,
    raw_text: Optional[str] = None,
) -> Any:
    """
    Decode sanitized model text and check it against the artifact shape.

    Returns IdeaMap, List[TechStackItem], MvpPlan or DevPrompt.

    Raises:
        AiParseError: text is not JSON; carries ``raw_text`` (the model's
            original, unsanitized output) for diagnostics.
        ResponseValidationError: JSON decoded but the shape is wrong;
            carries the decoded value and the individual issues.
    """
    original = sanitized if raw_text is None else raw_text

    try:
        data = load_json(sanitized, kind)
    except ValueError as e:
        logger.error("Failed to parse %s response: %s", kind.value, e)
        logger.debug("Unparseable %s response: %r", kind.value, original)
        raise AiParseError(f"Failed to parse {kind.value} response", original) from e

    try:
        return _ADAPTERS[kind].validate_python(data)
    except PydanticValidationError as e:
        issues = _issues_from(e)
        logger.error(
            "%s response validation failed: %s",
            kind.value,
            "; ".join(f"{i.location}: {i.message}" for i in issues),
        )
        raise ResponseValidationError(
            f"AI {kind.value} response format validation failed",
            data,
            issues,
        ) from e
