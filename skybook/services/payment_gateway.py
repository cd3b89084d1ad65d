import random
import string
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from skybook.core.config import settings


@dataclass
class ChargeResult:
    status: str          # completed | failed
    transaction_id: str


class PaymentGateway(ABC):
    """What the payment recorder needs from a processor."""

    name = "base"

    @abstractmethod
    def charge(self, reference: str, amount: Decimal, method: str) -> ChargeResult:
        ...


def make_transaction_id() -> str:
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"TXN{int(time.time() * 1000)}{suffix}"


class SandboxGateway(PaymentGateway):
    """Approves every charge. No card network is contacted."""

    name = "sandbox"

    def charge(self, reference: str, amount: Decimal, method: str) -> ChargeResult:
        return ChargeResult(status="completed", transaction_id=make_transaction_id())


_GATEWAYS = {
    SandboxGateway.name: SandboxGateway,
}


def get_payment_gateway() -> PaymentGateway:
    key = (settings.PAYMENT_GATEWAY or "sandbox").strip().lower()
    try:
        return _GATEWAYS[key]()
    except KeyError:
        raise RuntimeError(f"Unknown PAYMENT_GATEWAY {key!r}")
