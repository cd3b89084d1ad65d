from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# API field -> model column
FIELD_MAP = {
    "flightNumber": "flight_number",
    "airline": "airline",
    "departureCity": "departure_city",
    "arrivalCity": "arrival_city",
    "departureTime": "departure_time",
    "arrivalTime": "arrival_time",
    "price": "price",
    "availableSeats": "available_seats",
}


class FlightCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    flightNumber: str = Field(min_length=1)
    airline: str = Field(min_length=1)
    departureCity: str = Field(min_length=1)
    arrivalCity: str = Field(min_length=1)
    departureTime: datetime
    arrivalTime: datetime
    price: Decimal = Field(gt=0, decimal_places=2)
    availableSeats: int = Field(ge=0)

    def to_fields(self) -> dict:
        return {FIELD_MAP[k]: v for k, v in self.model_dump().items()}


class FlightUpdate(BaseModel):
    """Partial update; the merged record is re-validated by the service."""
    model_config = ConfigDict(str_strip_whitespace=True)

    flightNumber: Optional[str] = None
    airline: Optional[str] = None
    departureCity: Optional[str] = None
    arrivalCity: Optional[str] = None
    departureTime: Optional[datetime] = None
    arrivalTime: Optional[datetime] = None
    price: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    availableSeats: Optional[int] = Field(default=None, ge=0)

    def to_fields(self) -> dict:
        return {FIELD_MAP[k]: v for k, v in self.model_dump(exclude_unset=True).items()}
