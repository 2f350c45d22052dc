"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class RecordStoreError(Exception):
    """Raised when the backing store for customer records fails.

    Adapters wrap driver, filesystem and serialization errors in this type so
    the application layer can tell a failed operation from an empty result.
    """

    def __init__(self, backend: str, operation: str, message: str):
        self.backend = backend
        self.operation = operation
        self.message = message
        super().__init__(f"[{backend}] {operation} failed: {message}")
