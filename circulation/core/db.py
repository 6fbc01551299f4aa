import logging
from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from sqlalchemy.pool import NullPool, QueuePool, StaticPool
from circulation.configs import DB_URI, DEBUG

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Store handle owning the engine and session factory.

    One instance is built by the process entry point and passed to
    whatever needs storage; nothing in the package opens a connection
    on import.
    """

    def __init__(self, connection_string: Optional[str] = None, **engine_kwargs):
        self.connection_string = connection_string or DB_URI
        self.is_sqlite = self.connection_string.startswith("sqlite")
        self.is_memory = self.is_sqlite and (
            ":memory:" in self.connection_string
            or self.connection_string.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"))

        engine_kwargs.setdefault("echo", DEBUG)
        if self.is_sqlite:
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
            # an in-memory database lives only as long as its one connection
            engine_kwargs.setdefault("poolclass", StaticPool if self.is_memory else NullPool)
        else:
            engine_kwargs.setdefault("pool_size", 5)
            engine_kwargs.setdefault("max_overflow", 10)
            engine_kwargs.setdefault("poolclass", QueuePool)
            engine_kwargs.setdefault("client_encoding", "utf8")

        self.engine = create_engine(self.connection_string, **engine_kwargs)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._SessionFactory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False,
            expire_on_commit=False)

    @contextmanager
    def get_db(self) -> Iterator[Session]:
        """Context manager for one short unit of work."""
        session: Session = self._SessionFactory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init(self) -> None:
        """Creates any missing tables and indexes."""
        # models must be imported so their tables are registered on Base
        from circulation.core import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Schema initialized on {self.engine.url.render_as_string(hide_password=True)}")

    def drop(self) -> None:
        from circulation.core import models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)
        logger.warning(f"Schema dropped on {self.engine.url.render_as_string(hide_password=True)}")

    def dispose(self) -> None:
        self.engine.dispose()
