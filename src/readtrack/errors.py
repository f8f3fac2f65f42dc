# ABOUTME: Exception taxonomy shared by the repository, stores, and identity layers.
# ABOUTME: Every message is written to be shown to the end user as-is.


class RepositoryError(Exception):
    """Base class for failures surfaced by the book repository."""


class BookNotFoundError(RepositoryError):
    """Raised when a book record does not exist in the user's namespace."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id


class OwnershipError(RepositoryError):
    """Raised when a stored record belongs to a different user."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"You do not have access to book {book_id}")
        self.book_id = book_id


class BookValidationError(RepositoryError, ValueError):
    """Raised before a write when a required field is missing or invalid."""


class UploadFailedError(RepositoryError):
    """Raised when a cover image cannot be read, stored, or resolved to a URL."""


class AccessDeniedError(RepositoryError):
    """Raised when the record store refuses access to a namespace.

    For a brand-new user this is expected (the namespace does not exist yet),
    so listing treats it as an empty collection.
    """


class RecordStoreError(RepositoryError):
    """Raised for any other record store failure."""


class AuthError(Exception):
    """Raised when login, registration, or session lookup fails."""
