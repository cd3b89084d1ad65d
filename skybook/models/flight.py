from decimal import Decimal
from sqlalchemy import String, Integer, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from skybook.db.session import Base

class Flight(Base):
    __tablename__ = "flights"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    flight_number: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    airline: Mapped[str] = mapped_column(String(120))

    departure_city: Mapped[str] = mapped_column(String(120), index=True)
    arrival_city: Mapped[str] = mapped_column(String(120), index=True)
    departure_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)  # UTC
    arrival_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    # mutated by booking create/cancel; never negative
    available_seats: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
