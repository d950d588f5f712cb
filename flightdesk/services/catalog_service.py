import logging
from datetime import date, datetime
import math
from decimal import Decimal
from numbers import Real
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from flightdesk.core.errors import ValidationError, NotFoundError, StorageError
from flightdesk.models.flight import Flight

logger = logging.getLogger(__name__)

# Column limits: NUMERIC(10,2) price, 32-bit seats.
MAX_TEXT = Flight.__table__.c.origin.type.length
MAX_PRICE = 99_999_999.99
MAX_SEATS = 2**31 - 1


def _parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            pass
        try:
            # full ISO timestamps, as some clients send for date inputs
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValidationError("date must be YYYY-MM-DD")


def _required_text(name: str, value, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{name} must be at most {max_length} characters")
    return value


def _non_negative(name: str, value, maximum, integer: bool = False):
    # bool is an int subclass; True seats is not a seat count
    if value is None or isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise ValidationError(f"{name} must be a non-negative number")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a non-negative number")
    if integer and int(value) != value:
        raise ValidationError(f"{name} must be a whole number")
    if value < 0:
        raise ValidationError(f"{name} must be a non-negative number")
    if value > maximum:
        raise ValidationError(f"{name} must be at most {maximum}")
    return int(value) if integer else float(value)


def list_flights(db: Session) -> list[Flight]:
    try:
        return db.query(Flight).order_by(Flight.id.asc()).all()
    except SQLAlchemyError as e:
        logger.exception("listing flights failed")
        raise StorageError() from e


def get_flight(db: Session, flight_id: int) -> Flight:
    try:
        f = db.get(Flight, flight_id)
    except SQLAlchemyError as e:
        logger.exception("loading flight %s failed", flight_id)
        raise StorageError() from e
    if not f:
        raise NotFoundError("flight not found")
    return f


def create_flight(db: Session, origin: str, destination: str, date, price, seats) -> Flight:
    origin = _required_text("origin", origin, MAX_TEXT)
    destination = _required_text("destination", destination, MAX_TEXT)
    if date is None or date == "":
        raise ValidationError("date is required")
    flight_date = _parse_date(date)
    price = _non_negative("price", price, MAX_PRICE)
    seats = _non_negative("seats", seats, MAX_SEATS, integer=True)

    f = Flight(origin=origin, destination=destination, date=flight_date, price=price, seats=seats)
    try:
        db.add(f)
        db.commit()
        db.refresh(f)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("creating flight %s -> %s failed", origin, destination)
        raise StorageError() from e
    logger.info("flight %s created: %s -> %s on %s, %s seats", f.id, f.origin, f.destination, f.date, f.seats)
    return f


def delete_flight(db: Session, flight_id: int) -> None:
    """Remove a flight. Bookings that reference it are kept as they are."""
    try:
        deleted = db.query(Flight).filter(Flight.id == flight_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("deleting flight %s failed", flight_id)
        raise StorageError() from e
    if not deleted:
        raise NotFoundError("flight not found")
    logger.info("flight %s deleted", flight_id)
