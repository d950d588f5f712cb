import os

# Keep module-level settings off Postgres while the test session imports the app.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SMTP_HOST", "")
os.environ.setdefault("SENDGRID_API_KEY", "")

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from flightdesk.core.config import Settings
from flightdesk.db.session import Storage
from flightdesk.main import create_app
from flightdesk.models.flight import Flight


@pytest.fixture
def cfg():
    return Settings(_env_file=None, DATABASE_URL="sqlite://", SMTP_HOST="", SENDGRID_API_KEY="")


@pytest.fixture
def mail_cfg():
    return Settings(_env_file=None, DATABASE_URL="sqlite://", SMTP_HOST="smtp.test", SMTP_PORT=2525,
                    SENDGRID_API_KEY="", MAIL_TIMEOUT_SECONDS=1)


@pytest.fixture
def storage(tmp_path):
    # A file, not :memory:, so that threads get separate connections to the same data.
    s = Storage(f"sqlite:///{tmp_path / 'flightdesk.db'}")
    s.create_all()
    yield s
    s.dispose()


@pytest.fixture
def db(storage):
    with storage.session_scope() as session:
        yield session


@pytest.fixture
def make_flight(db):
    def _make(origin="New York", destination="London", seats=10, price=450.0, days=7):
        f = Flight(origin=origin, destination=destination, date=date.today() + timedelta(days=days),
                   price=price, seats=seats)
        db.add(f)
        db.commit()
        db.refresh(f)
        return f
    return _make


@pytest.fixture
def client(storage, cfg):
    with TestClient(create_app(storage=storage, cfg=cfg)) as c:
        yield c
