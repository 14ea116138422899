import logging
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from xtermux.database.entities import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the SQLAlchemy engine and hands out sessions."""

    def __init__(self, url: URL):
        connect_args = {"check_same_thread": False} if url.get_backend_name() == "sqlite" else {}
        self.engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.info("Database schema ready on %s", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
