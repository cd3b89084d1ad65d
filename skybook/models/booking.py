from decimal import Decimal
from sqlalchemy import String, Boolean, DateTime, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from skybook.db.session import Base

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    user_id: Mapped[str] = mapped_column(String(36), index=True)    # owner
    flight_id: Mapped[str] = mapped_column(String(36), index=True)  # may dangle after flight delete

    # [{"name", "email", "passportNumber"}]; embedded, never addressed on its own
    passengers: Mapped[list] = mapped_column(JSON, default=list)

    status: Mapped[str] = mapped_column(String(20), default="pending")          # pending, confirmed, cancelled
    payment_status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, completed, failed
    check_in_status: Mapped[bool] = mapped_column(Boolean, default=False)

    # flight price * passengers at booking time
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    booking_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
