from .customer_record_service import CustomerRecordService
from .results import OperationResult, UpdateOutcome

__all__ = [
    "CustomerRecordService",
    "OperationResult",
    "UpdateOutcome",
]
