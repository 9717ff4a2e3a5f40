from collections.abc import Callable

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from regie.core.config import Settings, settings
from regie.core.observability import get_logger

logger = get_logger(__name__)


def build_engine(config: Settings | None = None, url: str | None = None) -> Engine:
    """Create an engine for the configured database URL."""
    config = config or settings
    url = url or config.DATABASE_URL
    engine_kwargs: dict = {"echo": config.SQL_ECHO}
    if url.startswith("sqlite"):
        # Sessions are handed across FastAPI's worker threads
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs.update(pool_pre_ping=True, pool_recycle=3600)
    return create_engine(url, **engine_kwargs)


def create_db_and_tables(engine: Engine) -> None:
    # Registers the tables on SQLModel.metadata
    from regie.infrastructure.database import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("database_tables_created", url=str(engine.url))


def session_factory(engine: Engine) -> Callable[[], Session]:
    def make_session() -> Session:
        return Session(engine, expire_on_commit=False)

    return make_session


_engine: Engine | None = None


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine
