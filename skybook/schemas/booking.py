from pydantic import BaseModel, Field
from typing import List

class PassengerIn(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)  # plain str to allow .local and other dev domains
    passportNumber: str = Field(min_length=1)

class BookingCreate(BaseModel):
    flight: str  # flight id
    passengers: List[PassengerIn] = Field(min_length=1)
