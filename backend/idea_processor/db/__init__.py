from .models import Base, IdeaRecord
from .session import make_engine, make_session_factory

__all__ = [
    "Base",
    "IdeaRecord",
    "make_engine",
    "make_session_factory",
]
