"""Customer-level endpoints, addressed by the shared customer id."""

from fastapi import APIRouter, Depends, status

from flourmill.application.schemas import CustomerRecordPatch, CustomerRecordResponse
from flourmill.application.services import CustomerRecordService
from flourmill.infrastructure.dependencies import get_customer_record_service
from flourmill.presentation.api.v1.endpoints._errors import raise_for_outcome, unwrap_or_503

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("/{customer_id}/records", response_model=list[CustomerRecordResponse])
async def list_customer_records(
    customer_id: str,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> list[CustomerRecordResponse]:
    """Every transaction of one customer, newest first."""
    records = unwrap_or_503(await service.list_customer_records(customer_id))
    return [
        CustomerRecordResponse.model_validate(r, from_attributes=True) for r in records
    ]


@router.patch("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_customer(
    customer_id: str,
    data: CustomerRecordPatch,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> None:
    """Edit the customer's most recent record."""
    outcome = await service.update_customer(customer_id, data)
    raise_for_outcome(outcome, "Customer", customer_id)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    service: CustomerRecordService = Depends(get_customer_record_service),
) -> None:
    """Delete the customer's most recent record."""
    outcome = await service.delete_customer(customer_id)
    raise_for_outcome(outcome, "Customer", customer_id)
