"""Exception hierarchy shared by repositories, services and routers."""


class LibraryError(Exception):
    """Base class for errors raised by this application."""


class PrimaryStoreError(LibraryError):
    """The primary (relational) store rejected an operation."""


class MissingIdentifierError(PrimaryStoreError):
    def __init__(self, entity_name: str, operation: str) -> None:
        super().__init__(f"cannot {operation} {entity_name} without an id")
        self.entity_name = entity_name
        self.operation = operation


class EntityNotFoundError(PrimaryStoreError):
    def __init__(self, entity_name: str, entity_id: int) -> None:
        super().__init__(f"{entity_name} {entity_id} not found")
        self.entity_name = entity_name
        self.entity_id = entity_id


class SearchIndexError(LibraryError):
    """The secondary search index failed or returned unusable data."""


class SearchUnavailableError(SearchIndexError):
    def __init__(self, entity_name: str) -> None:
        super().__init__(f"search index for {entity_name} is not configured")
        self.entity_name = entity_name


class OperationTimeoutError(LibraryError, TimeoutError):
    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"{operation} timed out after {timeout:g}s")
        self.operation = operation
        self.timeout = timeout
