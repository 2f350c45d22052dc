"""Customer record endpoints — one milling transaction per record."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from flourmill.application.interfaces import SearchMode
from flourmill.application.schemas import (
    CustomerRecordCreate,
    CustomerRecordPatch,
    CustomerRecordResponse,
    LedgerSummaryResponse,
    RevenueResponse,
)
from flourmill.application.services import CustomerRecordService
from flourmill.domain.exceptions import EntityNotFoundError, RecordStoreError
from flourmill.infrastructure.dependencies import get_customer_record_service
from flourmill.presentation.api.v1.endpoints._errors import raise_for_outcome, unwrap_or_503

router = APIRouter(prefix="/customer-records", tags=["Customer Records"])


@router.get("", response_model=list[CustomerRecordResponse])
async def list_records(
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> list[CustomerRecordResponse]:
    """All records, newest first."""
    records = unwrap_or_503(await service.list_records())
    return [
        CustomerRecordResponse.model_validate(r, from_attributes=True) for r in records
    ]


@router.post("", response_model=CustomerRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    data: CustomerRecordCreate,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> CustomerRecordResponse:
    """Record a new transaction; id, rate, total and status are derived."""
    try:
        record = await service.create_record(data)
    except RecordStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return CustomerRecordResponse.model_validate(record, from_attributes=True)


@router.get("/search", response_model=list[CustomerRecordResponse])
async def search_records(
    q: str = Query(..., description="Customer id or name"),
    mode: SearchMode | None = Query(None, description="Name matching: exact or contains"),
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> list[CustomerRecordResponse]:
    records = unwrap_or_503(await service.search_records(q, mode))
    return [
        CustomerRecordResponse.model_validate(r, from_attributes=True) for r in records
    ]


@router.get("/revenue", response_model=RevenueResponse)
async def total_revenue(
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> RevenueResponse:
    total = unwrap_or_503(await service.get_total_revenue())
    return RevenueResponse(total_revenue=total)


@router.get("/summary", response_model=LedgerSummaryResponse)
async def summary(
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> LedgerSummaryResponse:
    """Dashboard counts and amounts split by payment status."""
    result = unwrap_or_503(await service.get_summary())
    return LedgerSummaryResponse.model_validate(result, from_attributes=True)


@router.get("/{record_id}", response_model=CustomerRecordResponse)
async def get_record(
    record_id: str,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> CustomerRecordResponse:
    try:
        record = await service.get_record(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except RecordStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return CustomerRecordResponse.model_validate(record, from_attributes=True)


@router.patch("/{record_id}", response_model=CustomerRecordResponse)
async def update_record(
    record_id: str,
    data: CustomerRecordPatch,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> CustomerRecordResponse:
    """Edit a record; price and payment status are re-derived."""
    outcome = await service.update_record(record_id, data)
    raise_for_outcome(outcome, "CustomerRecord", record_id)
    return await get_record(record_id, service)


@router.post("/{record_id}/toggle-payment", response_model=CustomerRecordResponse)
async def toggle_payment(
    record_id: str,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> CustomerRecordResponse:
    """Flip Paid/Pending on a Borrow record."""
    outcome = await service.toggle_payment_status(record_id)
    raise_for_outcome(outcome, "CustomerRecord", record_id)
    return await get_record(record_id, service)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: str,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> None:
    outcome = await service.delete_record(record_id)
    raise_for_outcome(outcome, "CustomerRecord", record_id)
