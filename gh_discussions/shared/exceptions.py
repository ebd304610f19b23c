"""
Custom exception hierarchy for the discussions server.

All errors inherit from DiscussionsError so they can be caught
uniformly at the tool boundary.
"""


class DiscussionsError(Exception):
    """Base exception for all discussions errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        self.message = message
        super().__init__(f"[{component}] {message}")


class InvalidArgumentError(DiscussionsError):
    """Caller supplied malformed or insufficient arguments."""

    def __init__(self, message: str):
        super().__init__(message, component="arguments")


class NotFoundError(DiscussionsError):
    """A lookup by name or number had no match."""

    def __init__(self, message: str):
        super().__init__(message, component="lookup")


class RemoteFailureError(DiscussionsError):
    """The GraphQL request failed; the remote message is kept verbatim."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, component="github")


class EncodingFailureError(DiscussionsError):
    """A result could not be serialised for the caller. Internal, not caller input."""

    def __init__(self, message: str):
        super().__init__(message, component="encoding")
