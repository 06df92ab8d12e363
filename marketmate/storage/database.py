"""
Database engine and session setup.

Nothing is created at import time: callers build a session factory with
create_session_factory and pass it to CampaignStore.
"""

import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from marketmate.core.logging_config import get_logger
from marketmate.core.config import get_config_value
from marketmate.core.constants import DEFAULT_DATABASE_FILE

# Initialize logger
logger = get_logger(__name__)

Base = declarative_base()


def get_database_url(url: Optional[str] = None) -> str:
    """
    Resolve the database URL.

    Args:
        url (str, optional): Explicit SQLAlchemy URL

    Returns:
        str: The URL from the argument, then config key database.url, then a local SQLite file
    """
    url = url or get_config_value("database.url")
    if url:
        return url

    db_path = os.path.expanduser(DEFAULT_DATABASE_FILE)
    os.makedirs(os.path.dirname(db_path), exist_ok=True)
    return f"sqlite:///{db_path}"


def init_db(engine) -> None:
    """
    Create all tables that do not exist yet.

    Args:
        engine: SQLAlchemy engine
    """
    # Models register themselves on Base.metadata when imported
    from marketmate.storage import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.debug("Database tables ensured")


def create_session_factory(url: Optional[str] = None, create_tables: bool = True) -> sessionmaker:
    """
    Create an engine and a session factory bound to it.

    Args:
        url (str, optional): SQLAlchemy database URL
        create_tables (bool): Whether to create missing tables

    Returns:
        sessionmaker: Session factory
    """
    database_url = get_database_url(url)

    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(database_url, connect_args=connect_args)
    logger.info(f"Connected to database {engine.url.render_as_string(hide_password=True)}")

    if create_tables:
        init_db(engine)

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
