from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel

class FlightIn(BaseModel):
    # Loose on purpose: the catalog service owns validation and reports it as a 400.
    origin: Optional[str] = None
    destination: Optional[str] = None
    date: Optional[str] = None
    price: Optional[float] = None
    seats: Optional[int] = None

class FlightOut(BaseModel):
    id: int
    origin: str
    destination: str
    date: date
    price: float
    seats: int
    createdAt: Optional[datetime] = None

    @classmethod
    def from_flight(cls, f) -> "FlightOut":
        return cls(
            id=f.id,
            origin=f.origin,
            destination=f.destination,
            date=f.date,
            price=f.price,
            seats=f.seats,
            createdAt=f.created_at,
        )
