from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skybook.db.session import get_db
from skybook.api.deps import require_roles
from skybook.api.responses import ok
from skybook.models.user import User
from skybook.schemas.flight import FlightCreate, FlightUpdate
from skybook.services.flight_service import (
    create_flight, delete_flight, get_flight, search_flights, serialize_flight, update_flight,
)

router = APIRouter(tags=["flights"])


@router.get("/flights")
def list_flights(
    departureCity: Optional[str] = None,
    arrivalCity: Optional[str] = None,
    departureDate: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Search flights. departureDate (YYYY-MM-DD) matches the whole local calendar day."""
    flights = search_flights(db, departure_city=departureCity, arrival_city=arrivalCity, departure_date=departureDate)
    return ok([serialize_flight(f) for f in flights], count=len(flights))


@router.get("/flights/{flight_id}")
def read_flight(flight_id: str, db: Session = Depends(get_db)):
    return ok(serialize_flight(get_flight(db, flight_id)))


@router.post("/flights", status_code=201)
def add_flight(body: FlightCreate, db: Session = Depends(get_db), me: User = Depends(require_roles("admin"))):
    return ok(serialize_flight(create_flight(db, me.id, body.to_fields())))


@router.put("/flights/{flight_id}")
def edit_flight(flight_id: str, body: FlightUpdate, db: Session = Depends(get_db),
                me: User = Depends(require_roles("admin"))):
    return ok(serialize_flight(update_flight(db, me.id, flight_id, body.to_fields())))


@router.delete("/flights/{flight_id}")
def remove_flight(flight_id: str, db: Session = Depends(get_db), me: User = Depends(require_roles("admin"))):
    delete_flight(db, me.id, flight_id)
    return ok({})
