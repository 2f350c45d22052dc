"""Business rules shared by every storage backend.

Pricing, payment-status derivation, customer name matching and the
dashboard summary all live here so the SQL and local backends cannot drift
apart on them.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from flourmill.domain.entities import CustomerRecord, PaymentMethod, PaymentStatus

FIXED_RATE_PER_KG = Decimal("2.00")

# Weights are kept to the gram, the scale of the stored weight column.
WEIGHT_QUANTUM = Decimal("0.001")

# Largest value an SQL INTEGER customer_id column can hold.
MAX_CUSTOMER_ID = 2**31 - 1


def parse_weight(raw: Any) -> Decimal:
    """Parse a caller-supplied wheat weight, falling back to zero.

    Empty, non-numeric and non-finite input all yield ``Decimal(0)`` rather
    than an error. Valid weights are rounded half-up to three decimal places
    so the total derived from them survives a database round trip unchanged.
    """
    if raw is None or isinstance(raw, bool):
        return Decimal(0)
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return Decimal(0)
        try:
            value = Decimal(text)
        except (InvalidOperation, ValueError):
            return Decimal(0)
    if not value.is_finite():
        return Decimal(0)
    try:
        return value.quantize(WEIGHT_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Too many digits to hold at gram precision.
        return Decimal(0)


def compute_price(weight: Any) -> tuple[Decimal, Decimal]:
    """Return ``(rate, total)`` for a weight; any caller rate is ignored."""
    kilograms = parse_weight(weight)
    return FIXED_RATE_PER_KG, kilograms * FIXED_RATE_PER_KG


def derive_payment_status(
    method: PaymentMethod,
    current: PaymentStatus | None = None,
) -> PaymentStatus:
    """Derive the payment status for a payment method.

    Cash is always Paid. Borrow starts out Pending and afterwards keeps
    whatever status the user last toggled to.
    """
    if method == PaymentMethod.CASH:
        return PaymentStatus.PAID
    if current is None:
        return PaymentStatus.PENDING
    return current


def toggled_status(status: PaymentStatus) -> PaymentStatus:
    if status == PaymentStatus.PAID:
        return PaymentStatus.PENDING
    return PaymentStatus.PAID


def normalize_name(name: str) -> str:
    """Key used for case-insensitive customer name comparisons."""
    return name.strip().lower()


def parse_customer_id(term: str) -> int | None:
    """Return the customer id a search term denotes, or None.

    Only plain ASCII digit strings within the range of the id column count.
    """
    text = term.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    value = int(text)
    return value if value <= MAX_CUSTOMER_ID else None


@dataclass(frozen=True)
class LedgerSummary:
    """Aggregated figures shown on the shop dashboard."""

    total_records: int
    distinct_customers: int
    ready_count: int
    total_revenue: Decimal
    paid_count: int
    paid_amount: Decimal
    pending_count: int
    pending_amount: Decimal


def summarize_records(records: Iterable[CustomerRecord]) -> LedgerSummary:
    total_records = ready_count = paid_count = pending_count = 0
    paid_amount = pending_amount = Decimal(0)
    customers: set[int | str] = set()

    for record in records:
        total_records += 1
        customers.add(record.customer_id)
        if record.is_ready:
            ready_count += 1
        if record.payment_status == PaymentStatus.PAID:
            paid_count += 1
            paid_amount += record.total_price
        else:
            pending_count += 1
            pending_amount += record.total_price

    return LedgerSummary(
        total_records=total_records,
        distinct_customers=len(customers),
        ready_count=ready_count,
        total_revenue=paid_amount + pending_amount,
        paid_count=paid_count,
        paid_amount=paid_amount,
        pending_count=pending_count,
        pending_amount=pending_amount,
    )
