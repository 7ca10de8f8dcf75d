"""Database plumbing for the SQLAlchemy backed blob store."""
from .database import Base, create_engine_for, make_session_factory, init_db

__all__ = ["Base", "create_engine_for", "make_session_factory", "init_db"]
