from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skybook.db.session import get_db
from skybook.api.deps import get_current_user
from skybook.api.responses import ok
from skybook.models.user import User
from skybook.services.booking_service import serialize_booking
from skybook.services.checkin_service import get_check_in_status, perform_check_in

router = APIRouter(tags=["check-in"])


@router.get("/check-in/{booking_id}")
def check_in_status(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return ok(get_check_in_status(db, booking_id, me.id, me.role))


@router.put("/check-in/{booking_id}")
def check_in(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return ok(serialize_booking(perform_check_in(db, booking_id, me.id, me.role)))
