"""Database engine and session factory used across the core."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import StaticPool
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from merchcore.runtime.config.config_data import DatabaseConfig


def register_tables() -> None:
    """Import every table model so its metadata is known before create_all."""
    from merchcore.entities.collection import table as _collection  # noqa: F401
    from merchcore.entities.inventory import table as _inventory  # noqa: F401
    from merchcore.entities.product import table as _product  # noqa: F401
    from merchcore.entities.shipping import table as _shipping  # noqa: F401


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig, engine: Engine | None = None):
        """Initialize the shared database engine and session factory."""
        self._config = db_config
        self._engine = engine or create_engine(
            db_config.url, echo=db_config.echo, **self._get_engine_args(db_config.url)
        )
        logger.info("Database engine initialized for {}", self._engine.url.render_as_string(hide_password=True))

        if db_config.create_schema:
            self.create_schema()

    @staticmethod
    def _get_engine_args(url: str) -> dict[str, Any]:
        """Get database-specific engine arguments."""
        if url.startswith("sqlite"):
            args: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
                # One shared connection, otherwise every session sees its own empty database
                args["poolclass"] = StaticPool
            return args
        return {"pool_pre_ping": True}

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        register_tables()
        SQLModel.metadata.create_all(self._engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        with Session(self._engine) as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    def dispose(self) -> None:
        self._engine.dispose()
