from .customer_record_repository import CustomerRecordRepository, SearchMode
from .key_value_storage import KeyValueStorage

__all__ = [
    "CustomerRecordRepository",
    "SearchMode",
    "KeyValueStorage",
]
