import logging
import threading
from typing import Dict, List

from idea_processor.errors import NotFoundError, PersistenceError
from idea_processor.registry.base import IdeaRegistry
from idea_processor.schemas import Idea, IdeaSummary

logger = logging.getLogger(__name__)


class InMemoryIdeaRegistry(IdeaRegistry):
    """Process-local registry. Ideas are frozen models, so sharing them is safe."""

    def __init__(self):
        self._ideas: Dict[str, Idea] = {}
        self._lock = threading.Lock()

    def put(self, idea: Idea) -> None:
        with self._lock:
            if idea.id in self._ideas:
                raise PersistenceError(
                    "Idea already stored",
                    {"id": idea.id},
                )
            self._ideas[idea.id] = idea
            size = len(self._ideas)

        logger.debug("Stored idea %s (%d in memory)", idea.id, size)

    def get(self, idea_id: str) -> Idea:
        with self._lock:
            idea = self._ideas.get(idea_id)
        if idea is None:
            raise NotFoundError(idea_id)
        return idea

    def list_ideas(self) -> List[IdeaSummary]:
        with self._lock:
            ideas = list(self._ideas.values())
        return [idea.summarize() for idea in ideas]

    def recent(self, limit: int) -> List[Idea]:
        if limit <= 0:
            return []
        with self._lock:
            return list(self._ideas.values())[-limit:]
