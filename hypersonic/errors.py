"""Exception types raised by hypersonic.

Every error the library raises derives from HypersonicError, so callers can
catch one type and still inspect the specific kind when they need to.
"""

from typing import Optional


class HypersonicError(Exception):
    """Base error for all hypersonic failures.

    Attributes:
        operation: Name of the step that failed (e.g. "create branch"), if known
        cause: The underlying exception, if this error wraps one
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.cause = cause


class ConfigurationError(HypersonicError):
    """Invalid or mutually exclusive configuration input."""
    pass


class ValidationError(HypersonicError):
    """Invalid call arguments, such as an empty change set."""
    pass


class GatewayError(HypersonicError):
    """A remote repository operation failed.

    Attributes:
        status: HTTP status code reported by GitHub, when there was one
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, operation=operation, cause=cause)
        self.status = status


class ProtocolError(HypersonicError):
    """The gateway returned a value of an unexpected shape."""
    pass


class LocalIOError(HypersonicError):
    """A local file could not be read."""
    pass


class GitError(HypersonicError):
    """A local git command failed."""
    pass
