import logging
from datetime import date, timedelta

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from flightdesk.db.session import Storage
from flightdesk.models.flight import Flight

logger = logging.getLogger(__name__)

# (origin, destination, days from today, price, seats)
SAMPLE_FLIGHTS = [
    ("New York", "London", 14, 450.00, 120),
    ("Paris", "Tokyo", 21, 890.00, 80),
    ("London", "Dubai", 10, 380.00, 150),
    ("Toronto", "New Delhi", 30, 1020.00, 60),
]


def run(db: Session | None = None):
    """Insert sample flights into an empty catalog. Safe to call on every start."""
    owned = db is None
    if owned:
        db = Storage().session()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM flights LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            logger.warning("flights table not found yet. Skipping seeding (run alembic upgrade head).")
            return 0

        if db.query(Flight).first():
            return 0

        today = date.today()
        for origin, destination, days, price, seats in SAMPLE_FLIGHTS:
            db.add(Flight(
                origin=origin,
                destination=destination,
                date=today + timedelta(days=days),
                price=price,
                seats=seats,
            ))
        db.commit()
        logger.info("seeded %d flights", len(SAMPLE_FLIGHTS))
        return len(SAMPLE_FLIGHTS)
    finally:
        if owned:
            db.close()
