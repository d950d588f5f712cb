from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session
from flightdesk.api.deps import get_settings
from flightdesk.core.config import Settings
from flightdesk.db.session import Storage, get_db, get_storage
from flightdesk.core.errors import ValidationError, NotFoundError, SoldOutError, StorageError
from flightdesk.schemas.booking import BookingCreate, BookingOut, BookingLookupOut
from flightdesk.services.booking_service import book_flight, list_bookings_by_email
from flightdesk.services.email_service import dispatch_booking_confirmation

router = APIRouter(tags=["bookings"])


@router.post("/book", response_model=BookingOut)
def create_booking(
    body: BookingCreate,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage),
    cfg: Settings = Depends(get_settings),
):
    try:
        booking = book_flight(db, body.flightId, body.passengerName, body.email)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except SoldOutError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=e.message)

    # Runs after the response is sent; its outcome never touches this booking.
    background.add_task(dispatch_booking_confirmation, storage, booking.id, cfg)
    return BookingOut(
        bookingId=booking.id,
        flightId=booking.flight_id,
        passengerName=booking.passenger_name,
        email=booking.email,
        bookingDate=booking.booking_date,
    )


@router.get("/bookings/{email}", response_model=list[BookingLookupOut])
def get_bookings(email: str, db: Session = Depends(get_db)):
    try:
        return list_bookings_by_email(db, email)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=e.message)
