from .customer_record import (
    CustomerRecord,
    CustomerType,
    FlourType,
    PaymentMethod,
    PaymentStatus,
)

__all__ = [
    "CustomerRecord",
    "CustomerType",
    "FlourType",
    "PaymentMethod",
    "PaymentStatus",
]
