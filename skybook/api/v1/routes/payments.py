from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skybook.db.session import get_db
from skybook.api.deps import get_current_user
from skybook.api.responses import ok
from skybook.models.user import User
from skybook.schemas.payments import PaymentCreate
from skybook.services.payment_gateway import PaymentGateway, get_payment_gateway
from skybook.services.payment_service import (
    get_payment, list_payments_for_user, process_payment, serialize_payment,
)

router = APIRouter(tags=["payments"])


@router.post("/payments", status_code=201)
def pay(body: PaymentCreate, db: Session = Depends(get_db), me: User = Depends(get_current_user),
        gateway: PaymentGateway = Depends(get_payment_gateway)):
    p = process_payment(db, body.bookingId, me.id, me.role, body.paymentMethod, gateway)
    return ok(serialize_payment(p))


@router.get("/payments")
def my_payments(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    rows = list_payments_for_user(db, me.id)
    return ok([serialize_payment(p, b) for p, b in rows], count=len(rows))


@router.get("/payments/{payment_id}")
def read_payment(payment_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    p, b = get_payment(db, payment_id, me.id, me.role)
    return ok(serialize_payment(p, b, with_passengers=True))
