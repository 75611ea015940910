from .backends import (
    ChatCompletionsBackend,
    CompletionsBackend,
    GenerationBackend,
    OllamaBackend,
    build_backend,
)
from .gateway import ModelGateway, ResponseShape, get_gateway, normalize_response
from .parser import ArtifactKind, check_shape, parse_and_validate
from .sanitizer import sanitize

__all__ = [
    "ArtifactKind",
    "ChatCompletionsBackend",
    "CompletionsBackend",
    "GenerationBackend",
    "ModelGateway",
    "OllamaBackend",
    "ResponseShape",
    "build_backend",
    "check_shape",
    "get_gateway",
    "normalize_response",
    "parse_and_validate",
    "sanitize",
]
