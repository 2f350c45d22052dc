from .customer_record_repository import SQLAlchemyCustomerRecordRepository

__all__ = [
    "SQLAlchemyCustomerRecordRepository",
]
