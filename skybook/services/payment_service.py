import logging
import uuid
from sqlalchemy.orm import Session

from skybook.core.errors import ConflictError, NotFoundError, ValidationError
from skybook.core.timeutil import isoformat
from skybook.models.booking import Booking
from skybook.models.payment import Payment
from skybook.services.access import ensure_owner_or_admin
from skybook.services.audit_service import log_audit
from skybook.services.booking_service import load_booking
from skybook.services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("credit_card", "debit_card", "paypal")


def process_payment(db: Session, booking_id: str, caller_id: str, caller_role: str, method: str,
                    gateway: PaymentGateway) -> Payment:
    if method not in PAYMENT_METHODS:
        raise ValidationError("Payment method must be one of: " + ", ".join(PAYMENT_METHODS))

    b = load_booking(db, booking_id, for_update=True)
    ensure_owner_or_admin(b.user_id, caller_id, caller_role, "Not authorized to make payment for this booking")
    if b.payment_status == "completed":
        raise ConflictError("Payment is already completed for this booking")
    if b.status == "cancelled":
        raise ConflictError("Cannot pay for a cancelled booking")

    # Amount is the price agreed at booking time, not the flight's current price.
    result = gateway.charge(reference=b.id, amount=b.total_price, method=method)
    p = Payment(
        id=str(uuid.uuid4()),
        booking_id=b.id,
        user_id=caller_id,
        amount=b.total_price,
        payment_method=method,
        status="completed" if result.status == "completed" else "failed",
        transaction_id=result.transaction_id,
    )
    db.add(p)

    if p.status == "completed":
        b.payment_status = "completed"
        b.status = "confirmed"
        log_audit(db, caller_id, "payment.completed", b.id,
                  paymentId=p.id, transactionId=p.transaction_id, gateway=gateway.name)
        db.commit()
        db.refresh(p)
        logger.info("payment %s completed for booking %s (%s)", p.transaction_id, b.id, method)
        return p

    b.payment_status = "failed"
    log_audit(db, caller_id, "payment.failed", b.id,
              paymentId=p.id, transactionId=p.transaction_id, gateway=gateway.name)
    db.commit()
    logger.warning("payment %s declined for booking %s", p.transaction_id, b.id)
    raise ConflictError("Payment failed")


def get_payment(db: Session, payment_id: str, caller_id: str, caller_role: str) -> tuple[Payment, Booking | None]:
    p = db.get(Payment, payment_id)
    if not p:
        raise NotFoundError("Payment not found")
    ensure_owner_or_admin(p.user_id, caller_id, caller_role, "Not authorized to access this payment")
    return p, db.get(Booking, p.booking_id)


def list_payments_for_user(db: Session, user_id: str) -> list[tuple[Payment, Booking | None]]:
    payments = db.query(Payment).filter(Payment.user_id == user_id).order_by(Payment.payment_date.asc()).all()
    booking_ids = {p.booking_id for p in payments}
    bookings = {b.id: b for b in db.query(Booking).filter(Booking.id.in_(booking_ids)).all()} if booking_ids else {}
    return [(p, bookings.get(p.booking_id)) for p in payments]


def booking_summary(b: Booking | None, with_passengers: bool = False) -> dict | None:
    if b is None:
        return None
    out = {"id": b.id, "status": b.status, "totalPrice": float(b.total_price)}
    if with_passengers:
        out["passengers"] = list(b.passengers or [])
    return out


def serialize_payment(p: Payment, booking: Booking | None = None, with_passengers: bool = False) -> dict:
    return {
        "id": p.id,
        "bookingId": p.booking_id,
        "user": p.user_id,
        "amount": float(p.amount),
        "paymentMethod": p.payment_method,
        "status": p.status,
        "transactionId": p.transaction_id,
        "paymentDate": isoformat(p.payment_date),
        "booking": booking_summary(booking, with_passengers),
    }
