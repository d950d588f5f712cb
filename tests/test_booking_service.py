import threading
from datetime import datetime, timedelta, timezone

import pytest

from flightdesk.core.errors import NotFoundError, SoldOutError, ValidationError
from flightdesk.models.booking import Booking
from flightdesk.models.flight import Flight
from flightdesk.services import catalog_service
from flightdesk.services.booking_service import book_flight, list_bookings_by_email


def _race(storage, flight_id, attempts):
    """Fire `attempts` bookings at the same flight at once, each on its own session."""
    barrier = threading.Barrier(attempts)
    outcomes = []
    lock = threading.Lock()

    def worker(i):
        with storage.session_scope() as s:
            barrier.wait()
            try:
                book_flight(s, flight_id, f"Passenger {i}", f"p{i}@example.com")
                result = "ok"
            except SoldOutError:
                result = "sold_out"
            except Exception as e:  # surfaced through the assertion below
                result = repr(e)
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(attempts)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes


def test_booking_takes_one_seat_and_records_ledger_entry(db, make_flight):
    f = make_flight(seats=3)

    b = book_flight(db, f.id, "Ada Lovelace", "Ada@Example.com ")

    db.refresh(f)
    assert f.seats == 2
    assert b.id is not None
    assert b.flight_id == f.id
    assert b.passenger_name == "Ada Lovelace"
    assert b.email == "ada@example.com"
    assert b.booking_date is not None


def test_last_seat_then_sold_out(db, make_flight):
    f = make_flight(seats=1)

    book_flight(db, f.id, "First", "first@example.com")
    with pytest.raises(SoldOutError):
        book_flight(db, f.id, "Second", "second@example.com")

    db.refresh(f)
    assert f.seats == 0
    assert db.query(Booking).count() == 1


def test_zero_seat_flight_is_sold_out(db, make_flight):
    f = make_flight(seats=0)
    with pytest.raises(SoldOutError) as exc:
        book_flight(db, f.id, "Ada", "ada@example.com")
    assert exc.value.message == "flight full"
    assert db.query(Booking).count() == 0


def test_unknown_flight_is_not_found(db):
    with pytest.raises(NotFoundError) as exc:
        book_flight(db, 999, "Ada", "ada@example.com")
    assert exc.value.message == "flight not found"


@pytest.mark.parametrize(
    "name,email",
    [
        ("", "a@example.com"),
        ("   ", "a@example.com"),
        ("Ada", ""),
        ("Ada", None),
        ("A" * 201, "a@example.com"),
        ("Ada", "a" * 310 + "@example.com"),
    ],
)
def test_blank_passenger_or_email_rejected(db, make_flight, name, email):
    f = make_flight(seats=2)
    with pytest.raises(ValidationError):
        book_flight(db, f.id, name, email)
    db.refresh(f)
    assert f.seats == 2


def test_concurrent_bookings_on_last_seat(storage, db, make_flight):
    f = make_flight(seats=1)

    outcomes = _race(storage, f.id, 2)

    assert sorted(outcomes) == ["ok", "sold_out"]
    db.refresh(f)
    assert f.seats == 0
    assert db.query(Booking).filter(Booking.flight_id == f.id).count() == 1


def test_concurrent_bookings_on_empty_flight_all_sold_out(storage, db, make_flight):
    f = make_flight(seats=0)

    outcomes = _race(storage, f.id, 4)

    assert outcomes == ["sold_out"] * 4
    db.refresh(f)
    assert f.seats == 0
    assert db.query(Booking).count() == 0


def test_concurrent_bookings_never_oversell(storage, db, make_flight):
    f = make_flight(seats=3)

    outcomes = _race(storage, f.id, 8)

    assert outcomes.count("ok") == 3
    assert outcomes.count("sold_out") == 5
    db.refresh(f)
    assert f.seats == 0
    assert db.query(Booking).filter(Booking.flight_id == f.id).count() == 3


def test_seats_never_negative_after_many_bookings(db, make_flight):
    flights = [make_flight(seats=n, origin=f"City {n}") for n in (0, 1, 2)]
    for _ in range(4):
        for f in flights:
            try:
                book_flight(db, f.id, "Ada", "ada@example.com")
            except SoldOutError:
                pass
    db.expire_all()
    assert all(s >= 0 for (s,) in db.query(Flight.seats).all())
    assert db.query(Booking).count() == 3


def test_lookup_after_booking_reflects_current_flight(db, make_flight):
    f = make_flight(origin="New York", destination="London", price=450.0)
    book_flight(db, f.id, "Ada", "ada@example.com")

    # price changes after booking; lookup joins at query time
    f.price = 499.0
    db.commit()

    rows = list_bookings_by_email(db, "ADA@example.com")
    assert len(rows) == 1
    row = rows[0]
    assert row["flightId"] == f.id
    assert row["passengerName"] == "Ada"
    assert (row["origin"], row["destination"], row["price"]) == ("New York", "London", 499.0)
    assert row["flightDate"] == f.date


def test_lookup_is_newest_first_and_scoped_to_email(db, make_flight):
    f = make_flight()
    now = datetime.now(timezone.utc)
    db.add_all([
        Booking(flight_id=f.id, passenger_name="old", email="ada@example.com", booking_date=now - timedelta(days=2)),
        Booking(flight_id=f.id, passenger_name="new", email="ada@example.com", booking_date=now),
        Booking(flight_id=f.id, passenger_name="mid", email="ada@example.com", booking_date=now - timedelta(days=1)),
        Booking(flight_id=f.id, passenger_name="other", email="bob@example.com", booking_date=now),
    ])
    db.commit()

    names = [r["passengerName"] for r in list_bookings_by_email(db, "ada@example.com")]
    assert names == ["new", "mid", "old"]
    assert list_bookings_by_email(db, "nobody@example.com") == []
    assert list_bookings_by_email(db, "") == []


def test_lookup_survives_deleted_flight(db, make_flight):
    kept = make_flight(origin="Paris", destination="Tokyo").id
    gone = make_flight(origin="New York", destination="London").id
    book_flight(db, kept, "Ada", "ada@example.com")
    book_flight(db, gone, "Ada", "ada@example.com")

    catalog_service.delete_flight(db, gone)

    rows = {r["flightId"]: r for r in list_bookings_by_email(db, "ada@example.com")}
    assert set(rows) == {kept, gone}
    assert rows[kept]["origin"] == "Paris"
    orphan = rows[gone]
    assert orphan["origin"] is None
    assert orphan["destination"] is None
    assert orphan["flightDate"] is None
    assert orphan["price"] is None
