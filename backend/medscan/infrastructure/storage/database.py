"""
Database Engine

Engine and session factory for the local SQL backend.
"""

from pathlib import Path
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


logger = logging.getLogger(__name__)


def create_database_engine(database_url: str) -> Engine:
    """
    Create an engine and make sure the tables exist.

    SQLite connections are shared across threads (FastAPI runs sync routes
    in a thread pool). In-memory SQLite uses a single static connection so
    every session sees the same database.
    """
    url = make_url(database_url)
    options = {}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, **options)
    Base.metadata.create_all(engine)
    logger.info(f"Database ready: {url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
