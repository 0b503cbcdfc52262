"""SQLModel engine setup for the local trade store."""

import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

logger = logging.getLogger(__name__)


def make_engine(database_url: str) -> Engine:
    """Create the engine for the local durable store."""
    # SQLite needs check_same_thread=False; PostgreSQL does not
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        database_url,
        echo=False,
        connect_args=connect_args,
    )


def create_db_and_tables(engine: Engine):
    """Create all tables. Called on startup."""
    # Register table models on the metadata before create_all
    import journal.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info(f"Local store ready at {engine.url.render_as_string(hide_password=True)}")
