from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class IdeaRecord(Base):
    __tablename__ = "ideas"

    seq = Column(Integer, primary_key=True, autoincrement=True)  # insertion order
    idea_id = Column(String(64), unique=True, nullable=False, index=True)
    original_text = Column(Text, nullable=False)
    memory_context = Column(Text, nullable=False, default="")
    generated_at = Column(DateTime(timezone=True), nullable=False)
    name = Column(String(255), nullable=False)
    summary = Column(Text, nullable=False)
    document = Column(JSON, nullable=False)  # {"root": ..., "insight": ...}
    stored_at = Column(DateTime(timezone=True), server_default=func.now())
