"""Domain entity — one milling transaction recorded for a customer."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4


class CustomerType(str, Enum):
    """Kind of customer; informational only."""

    REGULAR = "Regular"
    TEMPORARY = "Temporary"


class FlourType(str, Enum):
    """Flour produced from the customer's wheat.

    The entry form historically offered Maida while the hosted table did not;
    the canonical set is the union so that records from either source load.
    """

    ATTA = "Atta"
    MAIDA = "Maida"
    BESAN = "Besan"
    MULTIGRAIN = "Multigrain"
    OTHER = "Other"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    BORROW = "Borrow"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    PENDING = "Pending"


@dataclass
class CustomerRecord:
    """Core domain entity for a single wheat-milling transaction.

    ``id`` identifies the transaction itself, while ``customer_id`` is shared
    by every transaction recorded under the same (case-insensitive) name.
    ``rate_per_kg`` and ``total_price`` are always derived from
    ``wheat_weight``; use :meth:`reprice` rather than assigning them.
    """

    customer_id: int | str
    customer_name: str
    customer_type: CustomerType
    wheat_weight: Decimal
    flour_type: FlourType
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    is_ready: bool = False
    rate_per_kg: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def reprice(self) -> None:
        """Recompute rate and total from the current weight."""
        from flourmill.domain.rules import compute_price

        self.rate_per_kg, self.total_price = compute_price(self.wheat_weight)

    def touch(self) -> None:
        """Refresh the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)
