"""Contract tests run against both record backends.

The remote backend runs on a throwaway aiosqlite database; the local backend
on in-memory key-value storage. Both must agree on ids, pricing, search and
ordering.
"""

import asyncio
from decimal import Decimal

import pytest
import pytest_asyncio

from flourmill.application.interfaces import SearchMode
from flourmill.application.schemas import CustomerRecordCreate, CustomerRecordPatch
from flourmill.application.services import CustomerRecordService, UpdateOutcome
from flourmill.domain.entities import FlourType, PaymentMethod, PaymentStatus
from flourmill.infrastructure.database import Base
from flourmill.infrastructure.database.repositories import SQLAlchemyCustomerRecordRepository
from flourmill.infrastructure.database.session import build_engine, build_session_factory
from flourmill.infrastructure.storage.key_value_storage import InMemoryKeyValueStorage
from flourmill.infrastructure.storage.local_record_repository import (
    LocalCustomerRecordRepository,
)


@pytest_asyncio.fixture(params=["remote", "local"])
async def open_service(request, tmp_path):
    """Factory for services over one shared store.

    Each remote service gets its own session, so reads through a second
    service come from the database rather than a session's identity map.
    """
    if request.param == "remote":
        engine = build_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = build_session_factory(engine)
        sessions = []

        def _open(**kwargs) -> CustomerRecordService:
            session = session_factory()
            sessions.append(session)
            return CustomerRecordService(SQLAlchemyCustomerRecordRepository(session), **kwargs)

        yield _open
        for session in sessions:
            await session.close()
        await engine.dispose()
    else:
        storage = InMemoryKeyValueStorage()

        def _open(**kwargs) -> CustomerRecordService:
            return CustomerRecordService(LocalCustomerRecordRepository(storage), **kwargs)

        yield _open


@pytest_asyncio.fixture
async def service(open_service) -> CustomerRecordService:
    return open_service()


def _ravi_cash() -> CustomerRecordCreate:
    return CustomerRecordCreate(
        customer_name="Ravi",
        wheat_weight="10",
        flour_type=FlourType.ATTA,
        payment_method=PaymentMethod.CASH,
    )


def _ravi_borrow() -> CustomerRecordCreate:
    return CustomerRecordCreate(
        customer_name="Ravi",
        wheat_weight="5",
        payment_method=PaymentMethod.BORROW,
    )


@pytest.mark.asyncio
async def test_first_record_scenario(service: CustomerRecordService):
    record = await service.create_record(_ravi_cash())

    assert record.customer_id == 1
    assert record.rate_per_kg == Decimal("2.00")
    assert record.total_price == Decimal("20.00")
    assert record.payment_status == PaymentStatus.PAID


@pytest.mark.asyncio
async def test_second_record_for_same_customer(service: CustomerRecordService):
    first = await service.create_record(_ravi_cash())
    second = await service.create_record(_ravi_borrow())

    assert second.customer_id == first.customer_id
    assert second.total_price == Decimal("10.00")
    assert second.payment_status == PaymentStatus.PENDING


@pytest.mark.asyncio
async def test_distinct_names_get_increasing_ids(service: CustomerRecordService):
    ravi = await service.create_record(_ravi_cash())
    sita = await service.create_record(CustomerRecordCreate(customer_name="Sita", wheat_weight="1"))
    again = await service.create_record(CustomerRecordCreate(customer_name="SITA", wheat_weight="1"))

    assert ravi.customer_id == 1
    assert sita.customer_id == 2
    assert again.customer_id == 2


@pytest.mark.asyncio
async def test_search_by_id_exact_mode(service: CustomerRecordService):
    first = await service.create_record(_ravi_cash())
    second = await service.create_record(_ravi_borrow())
    await service.create_record(CustomerRecordCreate(customer_name="Store 1", wheat_weight="2"))

    found = (await service.search_records("1", SearchMode.EXACT)).unwrap()

    assert {r.id for r in found} == {first.id, second.id}


@pytest.mark.asyncio
async def test_search_by_id_contains_mode(service: CustomerRecordService):
    first = await service.create_record(_ravi_cash())
    second = await service.create_record(_ravi_borrow())
    store = await service.create_record(CustomerRecordCreate(customer_name="Store 1", wheat_weight="2"))
    await service.create_record(CustomerRecordCreate(customer_name="Sita", wheat_weight="2"))

    found = (await service.search_records("1", SearchMode.CONTAINS)).unwrap()

    assert {r.id for r in found} == {first.id, second.id, store.id}


@pytest.mark.asyncio
async def test_name_search_modes(service: CustomerRecordService):
    await service.create_record(_ravi_cash())
    await service.create_record(CustomerRecordCreate(customer_name="Ravi Kumar", wheat_weight="1"))

    exact = (await service.search_records("ravi")).unwrap()
    contains = (await service.search_records("ravi", SearchMode.CONTAINS)).unwrap()
    wildcard = (await service.search_records("%", SearchMode.CONTAINS)).unwrap()

    assert [r.customer_name for r in exact] == ["Ravi"]
    assert {r.customer_name for r in contains} == {"Ravi", "Ravi Kumar"}
    assert wildcard == []


@pytest.mark.asyncio
async def test_listing_newest_first_and_revenue(service: CustomerRecordService):
    await service.create_record(_ravi_cash())
    await service.create_record(_ravi_borrow())
    await service.create_record(CustomerRecordCreate(customer_name="Sita", wheat_weight="2.5"))

    listing = (await service.list_records()).unwrap()
    revenue = (await service.get_total_revenue()).unwrap()

    assert [r.customer_name for r in listing] == ["Sita", "Ravi", "Ravi"]
    assert revenue == sum(r.total_price for r in listing)
    assert revenue == Decimal("35")


@pytest.mark.asyncio
async def test_empty_store_revenue_is_zero(service: CustomerRecordService):
    assert (await service.get_total_revenue()).unwrap() == Decimal(0)


@pytest.mark.asyncio
async def test_update_recomputes_and_keeps_identity(service: CustomerRecordService):
    created = await service.create_record(_ravi_borrow())

    outcome = await service.update_record(
        created.id,
        CustomerRecordPatch(wheat_weight="8", payment_method=PaymentMethod.CASH, is_ready=True),
    )
    updated = await service.get_record(created.id)

    assert outcome is UpdateOutcome.UPDATED
    assert updated.total_price == Decimal("16")
    assert updated.payment_status == PaymentStatus.PAID
    assert updated.is_ready is True
    assert updated.customer_id == created.customer_id
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_unknown_id(service: CustomerRecordService):
    await service.create_record(_ravi_cash())
    before = (await service.list_records()).unwrap()

    outcome = await service.update_record("no-such-record", CustomerRecordPatch(wheat_weight="1"))

    assert outcome is UpdateOutcome.NOT_FOUND
    assert (await service.list_records()).unwrap() == before


@pytest.mark.asyncio
async def test_customer_level_update_and_delete(service: CustomerRecordService):
    older = await service.create_record(_ravi_cash())
    newer = await service.create_record(_ravi_borrow())

    assert await service.update_customer(1, CustomerRecordPatch(payment_status=PaymentStatus.PAID))
    assert (await service.get_record(newer.id)).payment_status == PaymentStatus.PAID

    assert await service.delete_customer(1)
    remaining = (await service.list_customer_records(1)).unwrap()
    assert [r.id for r in remaining] == [older.id]


@pytest.mark.asyncio
async def test_non_ascii_names_share_an_id_and_are_searchable(open_service):
    first = await open_service().create_record(
        CustomerRecordCreate(customer_name="Émile", wheat_weight="1")
    )
    second = await open_service().create_record(
        CustomerRecordCreate(customer_name="ÉMILE", wheat_weight="2")
    )
    reader = open_service()

    exact = (await reader.search_records("émile")).unwrap()
    contains = (await reader.search_records("MIL", SearchMode.CONTAINS)).unwrap()

    assert second.customer_id == first.customer_id
    assert {r.id for r in exact} == {first.id, second.id}
    assert {r.id for r in contains} == {first.id, second.id}


@pytest.mark.asyncio
async def test_stored_total_matches_stored_weight(open_service):
    created = await open_service().create_record(
        CustomerRecordCreate(customer_name="Ravi", wheat_weight="10.12345")
    )

    [stored] = (await open_service().list_records()).unwrap()

    assert stored.wheat_weight == created.wheat_weight == Decimal("10.123")
    assert stored.total_price == created.total_price == Decimal("20.246")
    assert stored.total_price == stored.wheat_weight * stored.rate_per_kg


@pytest.mark.asyncio
async def test_concurrent_new_customers_get_distinct_ids(open_service):
    lock = asyncio.Lock()
    first = open_service(id_lock=lock)
    second = open_service(id_lock=lock)

    ravi, sita = await asyncio.gather(
        first.create_record(CustomerRecordCreate(customer_name="Ravi", wheat_weight="1")),
        second.create_record(CustomerRecordCreate(customer_name="Sita", wheat_weight="1")),
    )

    assert {ravi.customer_id, sita.customer_id} == {1, 2}
    listing = (await open_service().list_records()).unwrap()
    assert {r.customer_name: r.customer_id for r in listing} == {
        "Ravi": ravi.customer_id,
        "Sita": sita.customer_id,
    }


@pytest.mark.asyncio
async def test_out_of_range_number_falls_back_to_name_search(service: CustomerRecordService):
    await service.create_record(_ravi_cash())

    result = await service.search_records("99999999999")

    assert result.ok
    assert result.unwrap() == []


@pytest.mark.asyncio
async def test_remote_backend_failure_is_reported(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        service = CustomerRecordService(SQLAlchemyCustomerRecordRepository(session))

        listing = await service.list_records()
        outcome = await service.update_record("x", CustomerRecordPatch(is_ready=True))

    await engine.dispose()

    assert not listing.ok
    assert "customer_records" in listing.error
    assert outcome is UpdateOutcome.FAILED
