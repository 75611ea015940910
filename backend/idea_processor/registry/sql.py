import logging
from datetime import timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from idea_processor.db.models import Base, IdeaRecord
from idea_processor.errors import NotFoundError, PersistenceError
from idea_processor.registry.base import IdeaRegistry
from idea_processor.schemas import Idea, IdeaSummary

logger = logging.getLogger(__name__)


def _aware(value):
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_idea(record: IdeaRecord) -> Idea:
    return Idea(
        id=record.idea_id,
        original_text=record.original_text,
        memory_context=record.memory_context or "",
        generated_at=_aware(record.generated_at),
        root=record.document["root"],
        insight=record.document["insight"],
    )


def _to_summary(record: IdeaRecord) -> IdeaSummary:
    return IdeaSummary(
        id=record.idea_id,
        name=record.name,
        summary=record.summary,
        generated_at=_aware(record.generated_at),
    )


class SqlIdeaRegistry(IdeaRegistry):
    """
    Registry backed by the ``ideas`` table.

    Each put() is its own transaction, so concurrent inserts are serialized
    by the database and readers never observe a half-written row.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @property
    def engine(self):
        return self.session_factory.kw["bind"]

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def put(self, idea: Idea) -> None:
        document = idea.model_dump(mode="json", by_alias=True, include={"root", "insight"})
        record = IdeaRecord(
            idea_id=idea.id,
            original_text=idea.original_text,
            memory_context=idea.memory_context,
            generated_at=idea.generated_at,
            name=idea.root.label,
            summary=idea.insight.summary,
            document=document,
        )

        with self.session_factory() as session:
            try:
                session.add(record)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise PersistenceError("Idea already stored", {"id": idea.id}) from e
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Failed to store idea %s: %s", idea.id, e)
                raise PersistenceError("Failed to store idea", {"id": idea.id}) from e

        logger.debug("Stored idea %s in database", idea.id)

    def get(self, idea_id: str) -> Idea:
        try:
            with self.session_factory() as session:
                record = session.execute(
                    select(IdeaRecord).where(IdeaRecord.idea_id == idea_id)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load idea", {"id": idea_id}) from e

        if record is None:
            raise NotFoundError(idea_id)
        return _to_idea(record)

    def list_ideas(self) -> List[IdeaSummary]:
        try:
            with self.session_factory() as session:
                records = session.execute(
                    select(IdeaRecord).order_by(IdeaRecord.seq)
                ).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list ideas") from e

        return [_to_summary(r) for r in records]

    def recent(self, limit: int) -> List[Idea]:
        if limit <= 0:
            return []
        try:
            with self.session_factory() as session:
                records = session.execute(
                    select(IdeaRecord).order_by(IdeaRecord.seq.desc()).limit(limit)
                ).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load recent ideas") from e

        return [_to_idea(r) for r in reversed(records)]
