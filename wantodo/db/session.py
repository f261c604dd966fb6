"""Database engine management for Wantodo."""

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from .. import config
from ..models import TaskRecord  # noqa: F401  registers the table


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for ``database_url``."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)


@lru_cache
def get_engine() -> Engine:
    """Return the process-wide engine for DATABASE_URL."""
    return build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)


def create_db_and_tables(engine: Engine) -> None:
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)
