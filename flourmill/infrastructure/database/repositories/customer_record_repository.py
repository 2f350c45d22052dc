"""Concrete repository implementation for CustomerRecord backed by SQLAlchemy."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flourmill.application.interfaces import CustomerRecordRepository, SearchMode
from flourmill.domain.entities import (
    CustomerRecord,
    CustomerType,
    FlourType,
    PaymentMethod,
    PaymentStatus,
)
from flourmill.domain.exceptions import RecordStoreError
from flourmill.domain.rules import MAX_CUSTOMER_ID, normalize_name, parse_customer_id
from flourmill.infrastructure.database.models import CustomerRecordModel

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLAlchemyCustomerRecordRepository(CustomerRecordRepository):
    """Implements the CustomerRecordRepository port using SQLAlchemy async sessions."""

    backend_name = "remote"

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: CustomerRecordModel) -> CustomerRecord:
        """Map ORM model → domain entity."""
        return CustomerRecord(
            id=model.id,
            customer_id=model.customer_id,
            customer_name=model.customer_name,
            customer_type=CustomerType(model.customer_type),
            wheat_weight=model.wheat_weight,
            flour_type=FlourType(model.flour_type),
            rate_per_kg=model.rate_per_kg,
            total_price=model.total_price,
            payment_method=PaymentMethod(model.payment_method),
            payment_status=PaymentStatus(model.payment_status),
            is_ready=model.is_ready,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def _to_model(self, entity: CustomerRecord) -> CustomerRecordModel:
        """Map domain entity → ORM model (for creation)."""
        return CustomerRecordModel(
            id=entity.id,
            customer_id=entity.customer_id,
            customer_name=entity.customer_name,
            customer_name_key=normalize_name(entity.customer_name),
            customer_type=entity.customer_type.value,
            wheat_weight=entity.wheat_weight,
            flour_type=entity.flour_type.value,
            rate_per_kg=entity.rate_per_kg,
            total_price=entity.total_price,
            payment_method=entity.payment_method.value,
            payment_status=entity.payment_status.value,
            is_ready=entity.is_ready,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        """Translate driver errors into RecordStoreError, leaving the session usable."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Database %s failed: %s", operation, exc)
            await self._session.rollback()
            raise RecordStoreError(self.backend_name, operation, str(exc)) from exc

    async def get_by_id(self, record_id: str) -> CustomerRecord | None:
        async with self._guard("get_by_id"):
            result = await self._session.get(CustomerRecordModel, record_id)
        return self._to_entity(result) if result else None

    async def get_all(self) -> list[CustomerRecord]:
        stmt = select(CustomerRecordModel).order_by(CustomerRecordModel.created_at.desc())
        async with self._guard("get_all"):
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        return [self._to_entity(row) for row in rows]

    async def get_by_customer_id(self, customer_id: int | str) -> list[CustomerRecord]:
        numeric_id = customer_id if isinstance(customer_id, int) else parse_customer_id(customer_id)
        if numeric_id is None or not 0 <= numeric_id <= MAX_CUSTOMER_ID:
            return []

        stmt = (
            select(CustomerRecordModel)
            .where(CustomerRecordModel.customer_id == numeric_id)
            .order_by(CustomerRecordModel.created_at.desc())
        )
        async with self._guard("get_by_customer_id"):
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        return [self._to_entity(row) for row in rows]

    async def find_customer_id_by_name(self, customer_name: str) -> int | None:
        stmt = (
            select(CustomerRecordModel.customer_id)
            .where(CustomerRecordModel.customer_name_key == normalize_name(customer_name))
            .order_by(CustomerRecordModel.created_at.desc())
            .limit(1)
        )
        async with self._guard("find_customer_id_by_name"):
            result = await self._session.execute(stmt)
            return result.scalars().first()

    async def next_customer_id(self) -> int:
        stmt = (
            select(CustomerRecordModel.customer_id)
            .order_by(CustomerRecordModel.customer_id.desc())
            .limit(1)
        )
        async with self._guard("next_customer_id"):
            result = await self._session.execute(stmt)
            highest = result.scalars().first()
        return highest + 1 if highest is not None else 1

    async def search(self, term: str, mode: SearchMode) -> list[CustomerRecord]:
        needle = normalize_name(term)
        name_column = CustomerRecordModel.customer_name_key
        if mode == SearchMode.CONTAINS:
            name_clause = name_column.contains(needle, autoescape=True)
        else:
            name_clause = name_column == needle

        numeric_id = parse_customer_id(term)
        if numeric_id is not None:
            clause = or_(CustomerRecordModel.customer_id == numeric_id, name_clause)
        else:
            clause = name_clause

        stmt = (
            select(CustomerRecordModel)
            .where(clause)
            .order_by(CustomerRecordModel.created_at.desc())
        )
        async with self._guard("search"):
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        return [self._to_entity(row) for row in rows]

    async def create(self, record: CustomerRecord) -> CustomerRecord:
        model = self._to_model(record)
        async with self._guard("create"):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model)

    async def commit(self) -> None:
        async with self._guard("commit"):
            await self._session.commit()

    async def update(self, record: CustomerRecord) -> bool:
        async with self._guard("update"):
            model = await self._session.get(CustomerRecordModel, record.id)
            if model is None:
                return False
            model.customer_name = record.customer_name
            model.customer_name_key = normalize_name(record.customer_name)
            model.customer_type = record.customer_type.value
            model.wheat_weight = record.wheat_weight
            model.flour_type = record.flour_type.value
            model.rate_per_kg = record.rate_per_kg
            model.total_price = record.total_price
            model.payment_method = record.payment_method.value
            model.payment_status = record.payment_status.value
            model.is_ready = record.is_ready
            model.updated_at = record.updated_at
            await self._session.flush()
        return True

    async def delete(self, record_id: str) -> bool:
        async with self._guard("delete"):
            model = await self._session.get(CustomerRecordModel, record_id)
            if model is None:
                return False
            await self._session.delete(model)
            await self._session.flush()
        return True

    async def total_revenue(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(CustomerRecordModel.total_price), 0))
        async with self._guard("total_revenue"):
            result = await self._session.execute(stmt)
            total = result.scalar_one()
        return Decimal(str(total))
