import logging
import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skybook.core.errors import ConflictError, NotFoundError, ValidationError
from skybook.core.timeutil import from_client, from_db, isoformat, local_day_bounds
from skybook.models.flight import Flight
from skybook.services.audit_service import log_audit

logger = logging.getLogger(__name__)

# Validation order is stable so clients get the same first error every time.
REQUIRED_FIELDS = (
    ("flight_number", "Please add a flight number"),
    ("airline", "Please add airline name"),
    ("departure_city", "Please add departure city"),
    ("arrival_city", "Please add arrival city"),
    ("departure_time", "Please add departure time"),
    ("arrival_time", "Please add arrival time"),
    ("price", "Please add price"),
    ("available_seats", "Please add available seats"),
)

SUMMARY_FIELDS = ("flightNumber", "airline", "departureCity", "arrivalCity", "departureTime", "arrivalTime")

# price column is Numeric(10, 2)
CENT = Decimal("0.01")


def parse_departure_date(value: str):
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("departureDate must be YYYY-MM-DD")


def search_flights(db: Session, departure_city: str | None = None, arrival_city: str | None = None,
                   departure_date: str | None = None) -> list[Flight]:
    q = db.query(Flight)
    if departure_city:
        q = q.filter(Flight.departure_city == departure_city)
    if arrival_city:
        q = q.filter(Flight.arrival_city == arrival_city)
    if departure_date:
        start, end = local_day_bounds(parse_departure_date(departure_date))
        q = q.filter(Flight.departure_time >= start, Flight.departure_time < end)
    return q.order_by(Flight.created_at.asc()).all()


def get_flight(db: Session, flight_id: str) -> Flight:
    f = db.get(Flight, flight_id)
    if not f:
        raise NotFoundError("Flight not found")
    return f


def lock_flight(db: Session, flight_id: str) -> Flight | None:
    """Load a flight with its row locked for the rest of the transaction (no-op lock on SQLite)."""
    return db.execute(
        select(Flight).where(Flight.id == flight_id).with_for_update()
    ).scalar_one_or_none()


def adjust_seats(db: Session, flight_id: str, delta: int) -> Flight:
    """Add delta to available_seats inside the caller's transaction. The caller commits."""
    f = lock_flight(db, flight_id)
    if not f:
        raise NotFoundError("Flight not found")
    if f.available_seats + delta < 0:
        raise ConflictError("Not enough seats available")
    f.available_seats += delta
    return f


def _validate(values: dict) -> None:
    for field, message in REQUIRED_FIELDS:
        v = values.get(field)
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValidationError(message)
    if values["price"] <= 0:
        raise ValidationError("Price must be greater than 0")
    if values["available_seats"] < 0:
        raise ValidationError("Available seats cannot be negative")
    if values["arrival_time"] <= values["departure_time"]:
        raise ValidationError("Arrival time must be after departure time")


def _ensure_unique_number(db: Session, flight_number: str, exclude_id: str | None = None) -> None:
    q = db.query(Flight.id).filter(Flight.flight_number == flight_number)
    if exclude_id:
        q = q.filter(Flight.id != exclude_id)
    if q.first():
        raise ValidationError("Duplicate flight number")


def _normalize(values: dict) -> dict:
    out = dict(values)
    for key in ("departure_time", "arrival_time"):
        if out.get(key) is not None:
            out[key] = from_client(out[key])
    if out.get("price") is not None:
        out["price"] = Decimal(str(out["price"])).quantize(CENT, rounding=ROUND_HALF_UP)
    if isinstance(out.get("flight_number"), str):
        out["flight_number"] = out["flight_number"].strip()
    return out


def _commit_flight(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        # unique index lost a race against a concurrent write
        db.rollback()
        raise ValidationError("Duplicate flight number")


def create_flight(db: Session, actor_id: str, fields: dict) -> Flight:
    values = _normalize(fields)
    _validate(values)
    _ensure_unique_number(db, values["flight_number"])

    f = Flight(id=str(uuid.uuid4()), **{k: values[k] for k, _ in REQUIRED_FIELDS})
    db.add(f)
    log_audit(db, actor_id, "flight.create", f.id, flightNumber=f.flight_number)
    _commit_flight(db)
    db.refresh(f)
    logger.info("flight %s created (%s seats)", f.flight_number, f.available_seats)
    return f


def update_flight(db: Session, actor_id: str, flight_id: str, changes: dict) -> Flight:
    f = get_flight(db, flight_id)
    merged = {k: getattr(f, k) for k, _ in REQUIRED_FIELDS}
    merged["departure_time"] = from_db(merged["departure_time"])
    merged["arrival_time"] = from_db(merged["arrival_time"])
    merged.update(_normalize(changes))
    _validate(merged)
    if merged["flight_number"] != f.flight_number:
        _ensure_unique_number(db, merged["flight_number"], exclude_id=f.id)

    for k, _ in REQUIRED_FIELDS:
        setattr(f, k, merged[k])
    log_audit(db, actor_id, "flight.update", f.id, fields=sorted(changes))
    _commit_flight(db)
    db.refresh(f)
    logger.info("flight %s updated: %s", f.flight_number, ", ".join(sorted(changes)) or "-")
    return f


def delete_flight(db: Session, actor_id: str, flight_id: str) -> None:
    # Bookings keep their flight_id; readers treat a missing flight as null.
    f = get_flight(db, flight_id)
    number = f.flight_number
    db.delete(f)
    log_audit(db, actor_id, "flight.delete", flight_id, flightNumber=number)
    db.commit()
    logger.info("flight %s deleted", number)


def serialize_flight(f: Flight) -> dict:
    return {
        "id": f.id,
        "flightNumber": f.flight_number,
        "airline": f.airline,
        "departureCity": f.departure_city,
        "arrivalCity": f.arrival_city,
        "departureTime": isoformat(f.departure_time),
        "arrivalTime": isoformat(f.arrival_time),
        "price": float(f.price),
        "availableSeats": f.available_seats,
        "createdAt": isoformat(f.created_at),
    }


def flight_summary(f: Flight | None, fields=SUMMARY_FIELDS) -> dict | None:
    if f is None:
        return None
    full = serialize_flight(f)
    out = {"id": f.id}
    out.update({k: full[k] for k in fields})
    return out
