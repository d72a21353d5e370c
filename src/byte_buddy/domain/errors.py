"""Error taxonomy for the tracker core."""


class ByteBuddyError(Exception):
    """Base class for recoverable tracker errors."""


class ValidationError(ByteBuddyError):
    """User input rejected before any I/O."""


class RemoteWriteError(ByteBuddyError):
    """A create, update or delete against the backing store failed."""


class RemoteReadError(ByteBuddyError):
    """A query against the backing store failed as a whole."""


class DecodeError(ByteBuddyError):
    """A single stored record could not be decoded."""


class SearchError(ByteBuddyError):
    """The external nutrition lookup failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(ByteBuddyError):
    """The authentication provider rejected a request."""
