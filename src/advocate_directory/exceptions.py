"""Exception types raised by the advocate directory.

Handlers map these to HTTP responses:
    - SearchValidationError -> 400 with the user-safe reason
    - StoreError -> opaque 500
    - CacheBackendError -> logged, request proceeds uncached
"""


class AdvocateDirectoryError(Exception):
    """Base class for advocate directory errors."""


class SearchValidationError(AdvocateDirectoryError):
    """Raised when search text is malformed or suspicious.

    Attributes:
        reason: User-safe explanation of why the query was rejected.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class StoreError(AdvocateDirectoryError):
    """Raised when the record store fails (connectivity, timeout, query error)."""


class CacheBackendError(AdvocateDirectoryError):
    """Raised by cache backends when the cache cannot be read or written.

    The result cache treats this as a miss and computes directly.
    """
