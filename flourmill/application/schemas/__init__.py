from .customer_record import (
    CustomerRecordCreate,
    CustomerRecordPatch,
    CustomerRecordResponse,
    LedgerSummaryResponse,
    RevenueResponse,
)

__all__ = [
    "CustomerRecordCreate",
    "CustomerRecordPatch",
    "CustomerRecordResponse",
    "LedgerSummaryResponse",
    "RevenueResponse",
]
