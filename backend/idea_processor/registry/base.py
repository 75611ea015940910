from abc import ABC, abstractmethod
from typing import List

from idea_processor.schemas import Idea, IdeaSummary


class IdeaRegistry(ABC):
    """
    Identity-keyed store of processed ideas.

    Contract:
    - put() is insert-only; storing an id twice raises PersistenceError
    - get() raises NotFoundError for unknown ids
    - list_ideas() returns summaries in insertion order
    - put() may run concurrently with itself, get() and list_ideas();
      readers see either the whole idea or nothing

    There is no eviction: the store grows for as long as the process
    (or the database) lives.
    """

    @abstractmethod
    def put(self, idea: Idea) -> None:
        pass

    @abstractmethod
    def get(self, idea_id: str) -> Idea:
        pass

    @abstractmethod
    def list_ideas(self) -> List[IdeaSummary]:
        pass

    def recent(self, limit: int) -> List[Idea]:
        """Latest ``limit`` ideas, oldest first."""
        if limit <= 0:
            return []
        summaries = self.list_ideas()[-limit:]
        return [self.get(s.id) for s in summaries]
