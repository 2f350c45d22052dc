"""Abstract repository interface (port) for CustomerRecord persistence."""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum

from flourmill.domain.entities import CustomerRecord


class SearchMode(str, Enum):
    """How a search term is compared against customer names.

    Both modes compare case-insensitively. An integer term additionally
    matches records whose customer_id equals it.
    """

    EXACT = "exact"
    CONTAINS = "contains"


class CustomerRecordRepository(ABC):
    """Port for customer record persistence — implemented in the infrastructure layer.

    Listing and search results are ordered newest first by ``created_at``.
    Implementations raise ``RecordStoreError`` when the backing store fails.
    """

    backend_name: str = "unknown"

    @abstractmethod
    async def get_by_id(self, record_id: str) -> CustomerRecord | None:
        """Retrieve a single record by its UUID."""
        ...

    @abstractmethod
    async def get_all(self) -> list[CustomerRecord]:
        """Retrieve every record, newest first."""
        ...

    @abstractmethod
    async def get_by_customer_id(self, customer_id: int | str) -> list[CustomerRecord]:
        """Retrieve all records sharing a customer id, newest first."""
        ...

    @abstractmethod
    async def find_customer_id_by_name(self, customer_name: str) -> int | str | None:
        """Customer id of the newest record whose name matches case-insensitively."""
        ...

    @abstractmethod
    async def next_customer_id(self) -> int:
        """One more than the highest integer customer id, or 1 when empty."""
        ...

    @abstractmethod
    async def search(self, term: str, mode: SearchMode) -> list[CustomerRecord]:
        """Match by customer id (integer terms) or by name."""
        ...

    @abstractmethod
    async def create(self, record: CustomerRecord) -> CustomerRecord:
        """Persist a new record and return it."""
        ...

    @abstractmethod
    async def update(self, record: CustomerRecord) -> bool:
        """Overwrite the mutable fields of an existing record.

        Returns False if no record with ``record.id`` exists.
        """
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def total_revenue(self) -> Decimal:
        """Sum of total_price over all records."""
        ...

    async def commit(self) -> None:
        """Make pending writes visible to other sessions.

        Stores that write through immediately need not override this.
        """
