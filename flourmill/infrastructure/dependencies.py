"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from flourmill.application.interfaces import SearchMode
from flourmill.application.services import CustomerRecordService
from flourmill.config import get_settings
from flourmill.infrastructure.database.repositories import SQLAlchemyCustomerRecordRepository
from flourmill.infrastructure.database.session import async_session_factory
from flourmill.infrastructure.storage.key_value_storage import JsonFileKeyValueStorage
from flourmill.infrastructure.storage.local_record_repository import (
    LocalCustomerRecordRepository,
)


async def get_customer_record_service() -> AsyncGenerator[CustomerRecordService, None]:
    """Provides a CustomerRecordService backed by the configured record store.

    The remote backend gets one database session per request, committed on
    success and rolled back on error.
    """
    settings = get_settings()
    search_mode = SearchMode(settings.search_mode)

    if settings.record_backend == "local":
        storage = JsonFileKeyValueStorage(settings.local_storage_dir)
        repository = LocalCustomerRecordRepository(storage, settings.local_storage_key)
        yield CustomerRecordService(repository, default_search_mode=search_mode)
        return

    async with async_session_factory() as session:
        try:
            yield CustomerRecordService(
                SQLAlchemyCustomerRecordRepository(session),
                default_search_mode=search_mode,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise
