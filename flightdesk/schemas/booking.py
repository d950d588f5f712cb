from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel

class BookingCreate(BaseModel):
    flightId: int
    passengerName: str
    email: str  # plain str to allow .local and other dev domains

class BookingOut(BaseModel):
    message: str = "Booking confirmed!"
    bookingId: int
    flightId: int
    passengerName: str
    email: str
    bookingDate: datetime

class BookingLookupOut(BaseModel):
    """One row of GET /api/v1/bookings/{email}. Flight fields are null once the flight is deleted."""
    bookingId: int
    passengerName: str
    bookingDate: datetime
    flightId: int
    origin: Optional[str] = None
    destination: Optional[str] = None
    flightDate: Optional[date] = None
    price: Optional[float] = None
