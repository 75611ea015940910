"""
Model gateway: one call into whatever text-generation backend is configured.

Backends answer in different shapes (Anthropic-style content segments,
a bare ``text`` field, chat-completion ``choices``, Ollama's ``message``).
``normalize_response`` is the single place those shapes are told apart;
nothing downstream ever sniffs a raw response.
"""

import json
import logging
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from idea_processor.errors import AiUnavailableError, ValidationError
from idea_processor.llm.backends import GenerationBackend

logger = logging.getLogger(__name__)


class ResponseShape(Enum):
    SEGMENTS = "segments"      # {"content": [{"text": ...}, ...]}
    TEXT = "text"              # {"text": "..."}
    CONTENT = "content"        # {"content": "..."}
    CHOICES = "choices"        # {"choices": [{"text"|"message": ...}]}
    MESSAGE = "message"        # {"message": {"content": "..."}}
    PLAIN = "plain"            # already a string
    SERIALIZED = "serialized"  # unknown mapping/list, dumped as JSON
    UNKNOWN = "unknown"


def classify_response(response: Any) -> ResponseShape:
    if isinstance(response, str):
        return ResponseShape.PLAIN

    if isinstance(response, Mapping):
        content = response.get("content")
        if isinstance(content, list):
            return ResponseShape.SEGMENTS
        if isinstance(response.get("text"), str):
            return ResponseShape.TEXT
        if isinstance(content, str):
            return ResponseShape.CONTENT
        if isinstance(response.get("choices"), list):
            return ResponseShape.CHOICES
        message = response.get("message")
        if isinstance(message, Mapping) and isinstance(message.get("content"), str):
            return ResponseShape.MESSAGE
        if response:
            return ResponseShape.SERIALIZED
        return ResponseShape.UNKNOWN

    if isinstance(response, list) and response:
        return ResponseShape.SERIALIZED

    return ResponseShape.UNKNOWN


def _segment_text(segment: Any) -> str:
    if isinstance(segment, Mapping):
        text = segment.get("text")
        return text if isinstance(text, str) else ""
    if isinstance(segment, str):
        return segment
    return ""


def _choice_text(choice: Any) -> str:
    if not isinstance(choice, Mapping):
        return ""
    text = choice.get("text")
    if isinstance(text, str) and text:
        return text
    message = choice.get("message")
    if isinstance(message, Mapping):
        content = message.get("content")
        if isinstance(content, str):
            return content
    return ""


def normalize_response(response: Any) -> Tuple[ResponseShape, str]:
    """
    Resolve a raw backend response into plain text.

    Raises AiUnavailableError when the response has no interpretable shape
    (None, empty containers, values that cannot be serialized).
    """
    # SDK objects (pydantic-based clients) expose their payload as a dict
    if hasattr(response, "model_dump") and callable(response.model_dump):
        try:
            response = response.model_dump()
        except Exception as e:
            raise AiUnavailableError(
                "AI model response could not be read",
                {"cause": f"{type(e).__name__}: {e}"},
            ) from e

    shape = classify_response(response)

    if shape is ResponseShape.PLAIN:
        return shape, response
    if shape is ResponseShape.SEGMENTS:
        return shape, "".join(_segment_text(c) for c in response["content"])
    if shape is ResponseShape.TEXT:
        return shape, response["text"]
    if shape is ResponseShape.CONTENT:
        return shape, response["content"]
    if shape is ResponseShape.CHOICES:
        return shape, "".join(_choice_text(c) for c in response["choices"])
    if shape is ResponseShape.MESSAGE:
        return shape, response["message"]["content"]
    if shape is ResponseShape.SERIALIZED:
        try:
            return shape, json.dumps(response)
        except (TypeError, ValueError, RecursionError) as e:
            raise AiUnavailableError(
                "AI model returned an unserializable response",
                {"responseType": type(response).__name__},
            ) from e

    raise AiUnavailableError(
        "AI model returned no interpretable response",
        {"responseType": type(response).__name__},
    )


class ModelGateway:
    """
    Uniform "prompt in, text out" boundary.

    No retries and no caching: any backend exception (HTTP error, timeout,
    connection refused) becomes AiUnavailableError and terminates the flow.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ):
        self.backend = backend
        self.max_tokens = max_tokens
        self.temperature = temperature

    def generate(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt must not be empty")

        try:
            response = self.backend.run(
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except AiUnavailableError:
            raise
        except Exception as e:
            logger.error("AI call failed: %s", e)
            raise AiUnavailableError(
                "Failed to call AI model",
                {"cause": f"{type(e).__name__}: {e}"},
            ) from e

        try:
            shape, text = normalize_response(response)
        except AiUnavailableError:
            raise
        except Exception as e:
            logger.error("AI response could not be normalized: %s", e)
            raise AiUnavailableError(
                "AI model returned an unreadable response",
                {"cause": f"{type(e).__name__}: {e}"},
            ) from e
        logger.debug("AI response shape=%s length=%d", shape.value, len(text))

        if not text.strip():
            raise AiUnavailableError(
                "AI model returned an empty response",
                {"shape": shape.value},
            )
        return text


_gateway: Optional[ModelGateway] = None


def get_gateway() -> ModelGateway:
    """Gateway built from config, created on first use."""
    global _gateway
    if _gateway is None:
        from idea_processor import config
        from idea_processor.llm.backends import build_backend

        _gateway = ModelGateway(
            backend=build_backend(
                provider=config.LLM_PROVIDER,
                base_url=config.LLM_BASE_URL,
                model=config.LLM_MODEL,
                api_key=config.LLM_API_KEY,
                timeout=config.LLM_TIMEOUT,
            ),
            max_tokens=config.LLM_MAX_TOKENS,
            temperature=config.LLM_TEMPERATURE,
        )
    return _gateway
