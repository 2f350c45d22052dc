"""CustomerRecord repository persisted as one JSON array in key-value storage.

Every mutation reads the whole array, changes it and writes it back. Two
processes sharing one storage directory therefore follow last-write-wins on
the complete dataset.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from flourmill.application.interfaces import CustomerRecordRepository, KeyValueStorage, SearchMode
from flourmill.domain.entities import (
    CustomerRecord,
    CustomerType,
    FlourType,
    PaymentMethod,
    PaymentStatus,
)
from flourmill.domain.exceptions import RecordStoreError
from flourmill.domain.rules import normalize_name, parse_customer_id

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "wheatStore_customerRecords"


class StoredCustomerRecord(BaseModel):
    """On-disk shape of one record (camelCase keys).

    Older blobs lack ``recordId`` and ``updatedAt``, may carry string
    customer ids and may say ``Permanent`` instead of ``Regular``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    record_id: str = Field(default_factory=lambda: str(uuid4()))
    customer_id: int | str
    customer_name: str
    customer_type: CustomerType = CustomerType.REGULAR
    wheat_weight: Decimal = Decimal(0)
    flour_type: FlourType = FlourType.OTHER
    rate_per_kg: Decimal = Decimal(0)
    total_price: Decimal = Decimal(0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PAID
    is_ready: bool = False
    created_at: datetime
    updated_at: datetime | None = None

    @field_validator("customer_id", mode="before")
    @classmethod
    def _numeric_ids_as_int(cls, value: Any) -> Any:
        if isinstance(value, str):
            numeric = parse_customer_id(value)
            return numeric if numeric is not None else value
        return value

    @field_validator("customer_type", mode="before")
    @classmethod
    def _permanent_is_regular(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() == "permanent":
            return CustomerType.REGULAR
        return value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_entity(self) -> CustomerRecord:
        return CustomerRecord(
            id=self.record_id,
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            customer_type=self.customer_type,
            wheat_weight=self.wheat_weight,
            flour_type=self.flour_type,
            rate_per_kg=self.rate_per_kg,
            total_price=self.total_price,
            payment_method=self.payment_method,
            payment_status=self.payment_status,
            is_ready=self.is_ready,
            created_at=self.created_at,
            updated_at=self.updated_at or self.created_at,
        )

    @classmethod
    def from_entity(cls, entity: CustomerRecord) -> "StoredCustomerRecord":
        return cls(
            record_id=entity.id,
            customer_id=entity.customer_id,
            customer_name=entity.customer_name,
            customer_type=entity.customer_type,
            wheat_weight=entity.wheat_weight,
            flour_type=entity.flour_type,
            rate_per_kg=entity.rate_per_kg,
            total_price=entity.total_price,
            payment_method=entity.payment_method,
            payment_status=entity.payment_status,
            is_ready=entity.is_ready,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


_RECORDS_ADAPTER = TypeAdapter(list[StoredCustomerRecord])


def _newest_first(records: list[CustomerRecord]) -> list[CustomerRecord]:
    # Records are stored oldest first; reversing before the stable sort puts
    # later insertions first when timestamps tie.
    return sorted(reversed(records), key=lambda r: r.created_at, reverse=True)


class LocalCustomerRecordRepository(CustomerRecordRepository):
    """Implements the CustomerRecordRepository port over a single JSON blob."""

    backend_name = "local"

    def __init__(self, storage: KeyValueStorage, storage_key: str = DEFAULT_STORAGE_KEY):
        self._storage = storage
        self._storage_key = storage_key

    # ── Blob I/O ────────────────────────────────────────────────────

    async def _load(self) -> list[CustomerRecord]:
        """Read every record in insertion order (oldest first)."""
        try:
            raw = await self._storage.get(self._storage_key)
            if not raw:
                return []
            stored = _RECORDS_ADAPTER.validate_json(raw)
        except (OSError, ValidationError) as exc:
            logger.error("Could not read '%s': %s", self._storage_key, exc)
            raise RecordStoreError(self.backend_name, "load", str(exc)) from exc

        records = [item.to_entity() for item in stored]
        if any("record_id" not in item.model_fields_set for item in stored):
            # Pin the freshly generated record ids so they survive the next read.
            logger.info("Assigning record ids to legacy entries in '%s'", self._storage_key)
            await self._save(records)
        return records

    async def _save(self, records: list[CustomerRecord]) -> None:
        stored = [StoredCustomerRecord.from_entity(record) for record in records]
        try:
            payload = _RECORDS_ADAPTER.dump_json(stored, by_alias=True).decode("utf-8")
            await self._storage.set(self._storage_key, payload)
        except (OSError, ValueError) as exc:
            logger.error("Could not write '%s': %s", self._storage_key, exc)
            raise RecordStoreError(self.backend_name, "save", str(exc)) from exc

    # ── Port implementation ─────────────────────────────────────────

    async def get_by_id(self, record_id: str) -> CustomerRecord | None:
        for record in await self._load():
            if record.id == record_id:
                return record
        return None

    async def get_all(self) -> list[CustomerRecord]:
        return _newest_first(await self._load())

    async def get_by_customer_id(self, customer_id: int | str) -> list[CustomerRecord]:
        if isinstance(customer_id, str):
            numeric = parse_customer_id(customer_id)
            customer_id = numeric if numeric is not None else customer_id
        records = await self._load()
        return _newest_first([r for r in records if r.customer_id == customer_id])

    async def find_customer_id_by_name(self, customer_name: str) -> int | str | None:
        wanted = normalize_name(customer_name)
        for record in _newest_first(await self._load()):
            if normalize_name(record.customer_name) == wanted:
                return record.customer_id
        return None

    async def next_customer_id(self) -> int:
        numeric_ids = [r.customer_id for r in await self._load() if isinstance(r.customer_id, int)]
        return max(numeric_ids, default=0) + 1

    async def search(self, term: str, mode: SearchMode) -> list[CustomerRecord]:
        needle = normalize_name(term)
        numeric_id = parse_customer_id(term)

        def matches(record: CustomerRecord) -> bool:
            if numeric_id is not None and record.customer_id == numeric_id:
                return True
            name = normalize_name(record.customer_name)
            if mode == SearchMode.CONTAINS:
                return needle in name
            return name == needle

        return _newest_first([r for r in await self._load() if matches(r)])

    async def create(self, record: CustomerRecord) -> CustomerRecord:
        records = await self._load()
        records.append(record)
        await self._save(records)
        return record

    async def update(self, record: CustomerRecord) -> bool:
        records = await self._load()
        for index, existing in enumerate(records):
            if existing.id == record.id:
                # created_at and customer_id are fixed at creation
                record.created_at = existing.created_at
                record.customer_id = existing.customer_id
                records[index] = record
                await self._save(records)
                return True
        return False

    async def delete(self, record_id: str) -> bool:
        records = await self._load()
        for index, existing in enumerate(records):
            if existing.id == record_id:
                del records[index]
                await self._save(records)
                return True
        return False

    async def total_revenue(self) -> Decimal:
        return sum((r.total_price for r in await self._load()), Decimal(0))
