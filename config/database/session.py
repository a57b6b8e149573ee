import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import DatabaseSettings
from content.domain.exceptions import StorageFailure

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(settings: DatabaseSettings) -> Engine:
    """
    Build the SQLAlchemy engine for the configured URL.

    For file-backed SQLite the parent directory is created first; in-memory
    SQLite gets a StaticPool so every session sees the same database.
    """
    url = make_url(settings.url)
    kwargs = {"echo": settings.echo, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    logger.info("Using database %s", url.render_as_string(hide_password=True))
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db_schema(engine: Engine) -> None:
    """
    Create the videos and visitors tables when they do not exist yet.
    """
    # models must be imported so their tables are registered on Base.metadata
    from content.infrastructure.orm import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        raise StorageFailure(f"Failed to create tables: {exc}") from exc
