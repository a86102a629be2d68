# /quadriparlanti/db/database.py

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ..core.config import get_settings


@lru_cache()
def get_engine() -> Engine:
    """
    Builds the engine from BACKEND_URL on first use. Missing configuration
    surfaces here, as a ConfigurationError from get_settings().
    """
    database_url = get_settings().backend_url
    # The 'check_same_thread' argument is only needed for SQLite.
    engine_args = {"connect_args": {"check_same_thread": False}} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, **engine_args)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


# Dependency to get a DB session, one per request.
def get_db():
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
