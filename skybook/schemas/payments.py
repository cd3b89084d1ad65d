from typing import Literal
from pydantic import BaseModel


class PaymentCreate(BaseModel):
    bookingId: str
    paymentMethod: Literal["credit_card", "debit_card", "paypal"]
