from typing import Optional

from .context import FlowContext, FlowState
from .ids import generate_idea_id
from .orchestrator import IdeaPipeline

_pipeline: Optional[IdeaPipeline] = None


def get_pipeline() -> IdeaPipeline:
    """Pipeline wired from config, created on first use."""
    global _pipeline
    if _pipeline is None:
        from idea_processor import config
        from idea_processor.llm.gateway import get_gateway
        from idea_processor.registry import get_registry

        _pipeline = IdeaPipeline(
            gateway=get_gateway(),
            registry=get_registry(),
            recent_limit=config.RECENT_CONTEXT_LIMIT,
            recent_chars=config.RECENT_CONTEXT_CHARS,
        )
    return _pipeline


def reset_pipeline() -> None:
    global _pipeline
    _pipeline = None


__all__ = [
    "FlowContext",
    "FlowState",
    "IdeaPipeline",
    "generate_idea_id",
    "get_pipeline",
    "reset_pipeline",
]
