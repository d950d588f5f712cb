from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from flightdesk.core.config import Settings, settings as default_settings


class Base(DeclarativeBase):
    pass


def _engine_kwargs(url: str, cfg: Settings) -> dict:
    if url.startswith("sqlite"):
        # Request threads share the file; the busy timeout serializes writers instead of failing them.
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    kwargs = {"pool_pre_ping": True, "pool_timeout": cfg.DB_POOL_TIMEOUT}
    if url.startswith("postgresql"):
        kwargs["connect_args"] = {"connect_timeout": cfg.DB_CONNECT_TIMEOUT}
    return kwargs


class Storage:
    """Handle on the catalog/ledger database.

    One instance per process (API app or worker); every unit of work opens its
    own session from it.
    """

    def __init__(self, url: str | None = None, cfg: Settings | None = None, engine: Engine | None = None):
        cfg = cfg or default_settings
        self.url = url or cfg.DATABASE_URL
        self.engine = engine or create_engine(self.url, **_engine_kwargs(self.url, cfg))
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        db = self.session()
        try:
            yield db
        finally:
            db.close()

    def create_all(self) -> None:
        # Importing the models registers their tables on Base.metadata.
        from flightdesk.models import booking, email_log, flight  # noqa: F401
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_db(request: Request) -> Iterator[Session]:
    db = get_storage(request).session()
    try:
        yield db
    finally:
        db.close()
