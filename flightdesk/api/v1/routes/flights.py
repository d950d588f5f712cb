from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from flightdesk.db.session import get_db
from flightdesk.core.errors import ValidationError, NotFoundError, StorageError
from flightdesk.schemas.flight import FlightIn, FlightOut
from flightdesk.services import catalog_service
from flightdesk.services.search_service import filter_flights

router = APIRouter(tags=["flights"])


@router.get("/flights", response_model=list[FlightOut])
def list_flights(origin: Optional[str] = None, destination: Optional[str] = None, db: Session = Depends(get_db)):
    """All flights in creation order, optionally narrowed by origin/destination substrings."""
    try:
        flights = catalog_service.list_flights(db)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=e.message)
    return [FlightOut.from_flight(f) for f in filter_flights(flights, origin, destination)]


@router.get("/flights/{flight_id}", response_model=FlightOut)
def get_flight(flight_id: int, db: Session = Depends(get_db)):
    try:
        return FlightOut.from_flight(catalog_service.get_flight(db, flight_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=e.message)


@router.post("/flights", response_model=FlightOut, status_code=201)
def create_flight(body: FlightIn, db: Session = Depends(get_db)):
    try:
        f = catalog_service.create_flight(
            db,
            origin=body.origin,
            destination=body.destination,
            date=body.date,
            price=body.price,
            seats=body.seats,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=e.message)
    return FlightOut.from_flight(f)


@router.delete("/flights/{flight_id}")
def delete_flight(flight_id: int, db: Session = Depends(get_db)):
    try:
        catalog_service.delete_flight(db, flight_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=e.message)
    return {"message": "Flight deleted"}
