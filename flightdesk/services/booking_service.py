import logging
from sqlalchemy.orm import Session
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from flightdesk.core.errors import ValidationError, NotFoundError, SoldOutError, StorageError
from flightdesk.models.booking import Booking
from flightdesk.models.flight import Flight

logger = logging.getLogger(__name__)

MAX_NAME = Booking.__table__.c.passenger_name.type.length
MAX_EMAIL = Booking.__table__.c.email.type.length


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def book_flight(db: Session, flight_id: int, passenger_name: str, email: str) -> Booking:
    """Take one seat on `flight_id` and record the booking in a single transaction."""
    passenger_name = (passenger_name or "").strip()
    email = normalize_email(email)
    if not passenger_name:
        raise ValidationError("passenger name is required")
    if not email:
        raise ValidationError("email is required")
    if len(passenger_name) > MAX_NAME:
        raise ValidationError(f"passenger name must be at most {MAX_NAME} characters")
    if len(email) > MAX_EMAIL:
        raise ValidationError(f"email must be at most {MAX_EMAIL} characters")

    try:
        # Conditional decrement: the row write lock serializes concurrent bookings of the
        # same flight, and the seats > 0 guard makes the loser match zero rows.
        taken = db.execute(
            update(Flight)
            .where(Flight.id == flight_id, Flight.seats > 0)
            .values(seats=Flight.seats - 1)
            .execution_options(synchronize_session=False)
        ).rowcount
        if taken != 1:
            db.rollback()
            exists = db.execute(select(Flight.id).where(Flight.id == flight_id)).first()
            db.rollback()
            if not exists:
                raise NotFoundError("flight not found")
            raise SoldOutError("flight full")

        booking = Booking(flight_id=flight_id, passenger_name=passenger_name, email=email)
        db.add(booking)
        db.commit()
        db.refresh(booking)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("booking flight %s failed", flight_id)
        raise StorageError() from e

    logger.info("booking %s confirmed on flight %s for %s", booking.id, flight_id, email)
    return booking


def list_bookings_by_email(db: Session, email: str) -> list[dict]:
    """Bookings for `email`, newest first, joined with the flight's current details.

    The join is outer: a booking whose flight was deleted comes back with null
    flight fields.
    """
    email = normalize_email(email)
    if not email:
        return []
    try:
        rows = db.execute(
            select(
                Booking.id,
                Booking.flight_id,
                Booking.passenger_name,
                Booking.booking_date,
                Flight.origin,
                Flight.destination,
                Flight.date,
                Flight.price,
            )
            .outerjoin(Flight, Flight.id == Booking.flight_id)
            .where(Booking.email == email)
            .order_by(Booking.booking_date.desc(), Booking.id.desc())
        ).all()
    except SQLAlchemyError as e:
        logger.exception("looking up bookings for %s failed", email)
        raise StorageError() from e
    return [
        {
            "bookingId": r.id,
            "flightId": r.flight_id,
            "passengerName": r.passenger_name,
            "bookingDate": r.booking_date,
            "origin": r.origin,
            "destination": r.destination,
            "flightDate": r.date,
            "price": r.price,
        }
        for r in rows
    ]
