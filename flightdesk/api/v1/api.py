from fastapi import APIRouter
from flightdesk.api.v1.routes.flights import router as flights_router
from flightdesk.api.v1.routes.bookings import router as bookings_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(flights_router)
api_router.include_router(bookings_router)
