from sqlalchemy import String, DateTime, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from skybook.db.session import Base

class AuditLog(Base):
    """Append-only trail of catalog and booking changes. Rows are never updated."""

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    actor_user_id: Mapped[str] = mapped_column(String(36), index=True)  # admin or booking owner
    action: Mapped[str] = mapped_column(String(40), index=True)  # flight.update, booking.cancel, payment.failed ...
    entity_type: Mapped[str] = mapped_column(String(20))  # flight | booking
    entity_id: Mapped[str] = mapped_column(String(36))
    details_json: Mapped[str] = mapped_column(Text, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
