"""Application service (use case) for customer record operations."""

import asyncio
import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from flourmill.application.interfaces import CustomerRecordRepository, SearchMode
from flourmill.application.schemas import CustomerRecordCreate, CustomerRecordPatch
from flourmill.application.services.results import OperationResult, UpdateOutcome
from flourmill.domain.entities import CustomerRecord
from flourmill.domain.exceptions import EntityNotFoundError, RecordStoreError
from flourmill.domain.rules import (
    LedgerSummary,
    derive_payment_status,
    parse_weight,
    summarize_records,
    toggled_status,
)

logger = logging.getLogger(__name__)

# Serializes customer id lookup + insert + commit within this process.
# Separate processes writing to one database can still race on a brand-new
# name.
_ID_ASSIGNMENT_LOCK = asyncio.Lock()


class CustomerRecordService:
    """Orchestrates the ledger's record logic. Depends on the repository port (DI).

    Error contract:
        * ``create_record`` raises ``RecordStoreError`` when the store fails.
        * Reads return an ``OperationResult``; a storage failure is a failed
          result, never an empty success.
        * Mutations return an ``UpdateOutcome`` (UPDATED / NOT_FOUND / FAILED).
    """

    def __init__(
        self,
        repository: CustomerRecordRepository,
        *,
        default_search_mode: SearchMode = SearchMode.EXACT,
        id_lock: asyncio.Lock | None = None,
    ):
        self._repository = repository
        self._default_search_mode = default_search_mode
        self._id_lock = id_lock or _ID_ASSIGNMENT_LOCK

    # ── Creation ────────────────────────────────────────────────────

    async def assign_customer_id(self, customer_name: str) -> int | str:
        """Reuse the id already attached to this name, or allocate the next one."""
        existing = await self._repository.find_customer_id_by_name(customer_name)
        if existing is not None:
            return existing
        return await self._repository.next_customer_id()

    async def create_record(self, data: CustomerRecordCreate) -> CustomerRecord:
        name = data.customer_name.strip()
        try:
            async with self._id_lock:
                customer_id = await self.assign_customer_id(name)
                record = CustomerRecord(
                    customer_id=customer_id,
                    customer_name=name,
                    customer_type=data.customer_type,
                    wheat_weight=parse_weight(data.wheat_weight),
                    flour_type=data.flour_type,
                    payment_method=data.payment_method,
                    payment_status=derive_payment_status(data.payment_method),
                    is_ready=data.is_ready,
                )
                record.reprice()
                created = await self._repository.create(record)
                await self._repository.commit()
        except RecordStoreError:
            logger.exception("Failed to save customer record for '%s'", name)
            raise

        logger.info(
            "Recorded %s kg %s for customer %s (%s), total %s",
            created.wheat_weight,
            created.flour_type.value,
            created.customer_id,
            created.customer_name,
            created.total_price,
        )
        return created

    # ── Reads ───────────────────────────────────────────────────────

    async def get_record(self, record_id: str) -> CustomerRecord:
        record = await self._repository.get_by_id(record_id)
        if record is None:
            raise EntityNotFoundError("CustomerRecord", record_id)
        return record

    async def list_records(self) -> OperationResult[list[CustomerRecord]]:
        try:
            records = await self._repository.get_all()
        except RecordStoreError as exc:
            logger.exception("Error loading customer records")
            return OperationResult.failure(str(exc))
        return OperationResult.success(records)

    async def list_customer_records(
        self, customer_id: int | str
    ) -> OperationResult[list[CustomerRecord]]:
        try:
            records = await self._repository.get_by_customer_id(customer_id)
        except RecordStoreError as exc:
            logger.exception("Error loading records for customer %s", customer_id)
            return OperationResult.failure(str(exc))
        return OperationResult.success(records)

    async def search_records(
        self, term: str, mode: SearchMode | None = None
    ) -> OperationResult[list[CustomerRecord]]:
        """Find records by customer id or name.

        An integer term matches on customer id *or* name; anything else
        matches on name only. Blank terms match nothing.
        """
        term = term.strip()
        if not term:
            return OperationResult.success([])

        mode = mode or self._default_search_mode
        try:
            records = await self._repository.search(term, mode)
        except RecordStoreError as exc:
            logger.exception("Error searching customer records for '%s'", term)
            return OperationResult.failure(str(exc))
        return OperationResult.success(records)

    async def get_total_revenue(self) -> OperationResult[Decimal]:
        try:
            total = await self._repository.total_revenue()
        except RecordStoreError as exc:
            logger.exception("Error calculating total revenue")
            return OperationResult.failure(str(exc))
        return OperationResult.success(total)

    async def get_summary(self) -> OperationResult[LedgerSummary]:
        result = await self.list_records()
        if not result.ok:
            return OperationResult.failure(result.error or "failed to load records")
        return OperationResult.success(summarize_records(result.value or []))

    # ── Mutations ───────────────────────────────────────────────────

    async def update_record(
        self, record_id: str, patch: CustomerRecordPatch | Mapping[str, Any]
    ) -> UpdateOutcome:
        patch = self._coerce_patch(patch)
        try:
            record = await self._repository.get_by_id(record_id)
            if record is None:
                return UpdateOutcome.NOT_FOUND
            return await self._save_patched(record, patch)
        except RecordStoreError:
            logger.exception("Error updating customer record %s", record_id)
            return UpdateOutcome.FAILED

    async def update_customer(
        self, customer_id: int | str, patch: CustomerRecordPatch | Mapping[str, Any]
    ) -> UpdateOutcome:
        """Apply a patch to the most recently created record of a customer."""
        patch = self._coerce_patch(patch)
        try:
            record = await self._latest_for_customer(customer_id)
            if record is None:
                return UpdateOutcome.NOT_FOUND
            return await self._save_patched(record, patch)
        except RecordStoreError:
            logger.exception("Error updating records of customer %s", customer_id)
            return UpdateOutcome.FAILED

    async def toggle_payment_status(self, record_id: str) -> UpdateOutcome:
        """Flip Paid/Pending on a Borrow record; Cash records stay Paid."""
        try:
            record = await self._repository.get_by_id(record_id)
            if record is None:
                return UpdateOutcome.NOT_FOUND
            patch = CustomerRecordPatch(
                payment_status=toggled_status(record.payment_status)
            )
            return await self._save_patched(record, patch)
        except RecordStoreError:
            logger.exception("Error toggling payment status of %s", record_id)
            return UpdateOutcome.FAILED

    async def delete_record(self, record_id: str) -> UpdateOutcome:
        try:
            deleted = await self._repository.delete(record_id)
        except RecordStoreError:
            logger.exception("Error deleting customer record %s", record_id)
            return UpdateOutcome.FAILED
        if not deleted:
            return UpdateOutcome.NOT_FOUND
        logger.info("Deleted customer record %s", record_id)
        return UpdateOutcome.UPDATED

    async def delete_customer(self, customer_id: int | str) -> UpdateOutcome:
        """Delete the most recently created record of a customer."""
        try:
            record = await self._latest_for_customer(customer_id)
        except RecordStoreError:
            logger.exception("Error loading records of customer %s", customer_id)
            return UpdateOutcome.FAILED
        if record is None:
            return UpdateOutcome.NOT_FOUND
        return await self.delete_record(record.id)

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _coerce_patch(patch: CustomerRecordPatch | Mapping[str, Any]) -> CustomerRecordPatch:
        if isinstance(patch, CustomerRecordPatch):
            return patch
        return CustomerRecordPatch.model_validate(dict(patch))

    async def _latest_for_customer(self, customer_id: int | str) -> CustomerRecord | None:
        records = await self._repository.get_by_customer_id(customer_id)
        return records[0] if records else None

    async def _save_patched(
        self, record: CustomerRecord, patch: CustomerRecordPatch
    ) -> UpdateOutcome:
        self._apply_patch(record, patch)
        if not await self._repository.update(record):
            return UpdateOutcome.NOT_FOUND
        logger.info(
            "Updated customer record %s (customer %s), total %s, %s",
            record.id,
            record.customer_id,
            record.total_price,
            record.payment_status.value,
        )
        return UpdateOutcome.UPDATED

    @staticmethod
    def _apply_patch(record: CustomerRecord, patch: CustomerRecordPatch) -> None:
        if patch.customer_name is not None:
            record.customer_name = patch.customer_name.strip()
        if patch.customer_type is not None:
            record.customer_type = patch.customer_type
        if patch.flour_type is not None:
            record.flour_type = patch.flour_type
        if patch.is_ready is not None:
            record.is_ready = patch.is_ready
        if patch.wheat_weight is not None:
            record.wheat_weight = parse_weight(patch.wheat_weight)

        # A method change starts over from the creation-time status.
        if patch.payment_method is not None and patch.payment_method != record.payment_method:
            record.payment_method = patch.payment_method
            record.payment_status = derive_payment_status(record.payment_method)
        if patch.payment_status is not None:
            record.payment_status = patch.payment_status
        record.payment_status = derive_payment_status(
            record.payment_method, record.payment_status
        )

        record.reprice()
        record.touch()
