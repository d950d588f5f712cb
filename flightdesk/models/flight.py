from sqlalchemy import String, Integer, Date, DateTime, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime, timezone
from flightdesk.db.session import Base

class Flight(Base):
    __tablename__ = "flights"
    __table_args__ = (
        CheckConstraint("seats >= 0", name="ck_flights_seats_non_negative"),
        CheckConstraint("price >= 0", name="ck_flights_price_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    origin: Mapped[str] = mapped_column(String(120), index=True)
    destination: Mapped[str] = mapped_column(String(120), index=True)
    date: Mapped[date] = mapped_column(Date)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    seats: Mapped[int] = mapped_column(Integer)  # live count, only ever decremented by bookings
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
