from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skybook.db.session import get_db
from skybook.api.deps import get_current_user
from skybook.api.responses import ok
from skybook.models.user import User
from skybook.schemas.booking import BookingCreate
from skybook.services.booking_service import (
    cancel_booking, create_booking, get_booking, list_bookings_for_user, serialize_booking,
)

router = APIRouter(tags=["bookings"])


@router.get("/bookings")
def my_bookings(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    rows = list_bookings_for_user(db, me.id)
    return ok([serialize_booking(b, f, joined=True) for b, f in rows], count=len(rows))


@router.get("/bookings/{booking_id}")
def read_booking(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    b, f = get_booking(db, booking_id, me.id, me.role)
    return ok(serialize_booking(b, f, joined=True))


@router.post("/bookings", status_code=201)
def book_flight(body: BookingCreate, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    booking = create_booking(db, me.id, body.flight, [p.model_dump() for p in body.passengers])
    return ok(serialize_booking(booking))


@router.put("/bookings/{booking_id}/cancel")
def cancel(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return ok(serialize_booking(cancel_booking(db, booking_id, me.id, me.role)))
