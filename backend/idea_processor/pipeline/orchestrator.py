import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from idea_processor.errors import IdeaProcessorError, ValidationError
from idea_processor.llm.gateway import ModelGateway
from idea_processor.llm.parser import ArtifactKind, parse_and_validate
from idea_processor.llm.sanitizer import sanitize
from idea_processor.pipeline.context import FlowContext, FlowState
from idea_processor.pipeline.ids import generate_idea_id
from idea_processor.prompts import (
    build_dev_prompt,
    build_idea_map_prompt,
    build_mvp_prompt,
    build_tech_stack_prompt,
)
from idea_processor.registry.base import IdeaRegistry
from idea_processor.schemas import (
    DevPrompt,
    Idea,
    IdeaSummary,
    MvpPlan,
    TechStackItem,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdeaPipeline:
    """
    The four generation flows plus read access to stored ideas.

    Every flow runs  received -> building -> calling -> sanitizing ->
    validating [-> persisting] -> completed,  and stops at the first
    failure. Nothing is retried; the caller may resubmit.

    Only process() writes to the registry. Tech stacks, MVP plans and dev
    prompts are regenerated on every call and never stored.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        registry: IdeaRegistry,
        recent_limit: int = 3,
        recent_chars: int = 100,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = generate_idea_id,
    ):
        self.gateway = gateway
        self.registry = registry
        self.recent_limit = recent_limit
        self.recent_chars = recent_chars
        self.clock = clock
        self.id_factory = id_factory

    # --------------------------------------------------------
    # Flows
    # --------------------------------------------------------

    def process(self, text: str, memory_context: Optional[str] = "") -> Idea:
        ctx = FlowContext(flow="process")

        if not isinstance(text, str) or not text.strip():
            self._fail(ctx, ValidationError("Idea text is required"))
        if memory_context is None:
            memory_context = ""
        if not isinstance(memory_context, str):
            self._fail(ctx, ValidationError("memoryContext must be a string"))

        context = self._enrich_context(memory_context)

        ctx.advance(FlowState.BUILDING)
        ctx.prompt = build_idea_map_prompt(text, context)

        idea_map = self._generate(ctx, ArtifactKind.IDEA_MAP)

        idea = Idea(
            id=self.id_factory(),
            original_text=text,
            memory_context=memory_context,
            generated_at=self.clock(),
            root=idea_map.root,
            insight=idea_map.insight,
        )
        ctx.idea_id = idea.id

        ctx.advance(FlowState.PERSISTING)
        try:
            self.registry.put(idea)
        except IdeaProcessorError as e:
            self._fail(ctx, e)

        ctx.advance(FlowState.COMPLETED)
        logger.info("Processed idea %s (%s)", idea.id, idea.root.label)
        return idea

    def tech_stack(self, idea_id: str) -> List[TechStackItem]:
        return self._derive("tech-stack", idea_id, build_tech_stack_prompt, ArtifactKind.TECH_STACK)

    def mvp(self, idea_id: str) -> MvpPlan:
        return self._derive("mvp", idea_id, build_mvp_prompt, ArtifactKind.MVP)

    def dev_prompt(self, idea_id: str) -> DevPrompt:
        return self._derive("dev-prompt", idea_id, build_dev_prompt, ArtifactKind.DEV_PROMPT)

    # --------------------------------------------------------
    # Queries
    # --------------------------------------------------------

    def get_idea(self, idea_id: str) -> Idea:
        if not idea_id:
            raise ValidationError("Idea ID is required")
        return self.registry.get(idea_id)

    def list_ideas(self) -> List[IdeaSummary]:
        return self.registry.list_ideas()

    # --------------------------------------------------------
    # Internals
    # --------------------------------------------------------

    def _derive(
        self,
        flow: str,
        idea_id: str,
        build_prompt: Callable[[Idea], str],
        kind: ArtifactKind,
    ) -> Any:
        ctx = FlowContext(flow=flow, idea_id=idea_id)

        # Unknown ids fail here, before any model call
        try:
            idea = self.get_idea(idea_id)
        except IdeaProcessorError as e:
            self._fail(ctx, e)

        ctx.advance(FlowState.BUILDING)
        ctx.prompt = build_prompt(idea)

        artifact = self._generate(ctx, kind)

        ctx.advance(FlowState.COMPLETED)
        logger.info("Generated %s for idea %s", kind.value, idea_id)
        return artifact

    def _generate(self, ctx: FlowContext, kind: ArtifactKind) -> Any:
        """calling -> sanitizing -> validating; returns the typed artifact."""
        ctx.advance(FlowState.CALLING)
        try:
            ctx.raw_response = self.gateway.generate(ctx.prompt)
        except IdeaProcessorError as e:
            self._fail(ctx, e)

        ctx.advance(FlowState.SANITIZING)
        ctx.sanitized_response = sanitize(ctx.raw_response)

        ctx.advance(FlowState.VALIDATING)
        try:
            return parse_and_validate(ctx.sanitized_response, kind, raw_text=ctx.raw_response)
        except IdeaProcessorError as e:
            self._fail(ctx, e)

    def _fail(self, ctx: FlowContext, error: IdeaProcessorError) -> None:
        ctx.fail(error)
        raise error

    def _enrich_context(self, memory_context: str) -> str:
        """
        Append the most recent ideas to the caller's context.

        Best effort: any failure leaves the caller's context as is.
        """
        try:
            recent = self.registry.recent(self.recent_limit)
        except Exception as e:
            logger.warning("Failed to retrieve recent ideas: %s", e)
            return memory_context

        if not recent:
            return memory_context

        lines = [
            f"- {idea.id}: {idea.original_text[: self.recent_chars]}..."
            for idea in recent
        ]
        return memory_context + "\n\nRecent ideas considered:\n" + "\n".join(lines)
