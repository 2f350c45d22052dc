"""Maps service outcomes onto HTTP errors."""

from fastapi import HTTPException, status

from flourmill.application.services import OperationResult, UpdateOutcome


def raise_for_outcome(outcome: UpdateOutcome, entity: str, entity_id: str) -> None:
    if outcome is UpdateOutcome.NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} with id '{entity_id}' not found",
        )
    if outcome is UpdateOutcome.FAILED:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store unavailable",
        )


def unwrap_or_503(result: OperationResult):
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=result.error or "Record store unavailable",
        )
    return result.value
