from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Base class for all our database models
Base = declarative_base()


def create_engine_for(database_url: str) -> Engine:
    """
    Create the database engine (the connection manager) for a URL.

    SQLite connections are shared across threads, so the same-thread check
    is turned off for them, and transactions are begun by SQLAlchemy rather
    than the driver so that SAVEPOINTs nest inside them.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(database_url, connect_args={"check_same_thread": False})

        @event.listens_for(engine, "connect")
        def _disable_driver_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _begin(conn):
            conn.exec_driver_sql("BEGIN")

        return engine
    return create_engine(database_url)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create the blob tables if they do not exist yet."""
    # Import models so they are registered on Base before create_all
    from resultscache.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
