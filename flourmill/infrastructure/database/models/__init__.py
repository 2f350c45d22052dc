from .customer_record import CustomerRecordModel

__all__ = [
    "CustomerRecordModel",
]
