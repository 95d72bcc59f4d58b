"""
Exception types raised by metacreate.

All errors derive from MetacreateError. Where a builtin exception already
describes the failure, the error also subclasses it so callers can catch
either.
"""


class MetacreateError(Exception):
    """Base class for all metacreate errors."""

    pass


class ReadOnlyError(MetacreateError, TypeError):
    """Raised when a write is attempted through a read-only proxy."""

    def __init__(self, key: object = None) -> None:
        self.key = key
        super().__init__("cannot write to read-only table")


class ProxyLookupError(MetacreateError, LookupError):
    """
    Raised when a proxy trap cannot find its real container.

    This indicates a broken proxy lifecycle (for example, an intercepting
    spec attached to a table that was never registered as a proxy), not a
    user error in the data.
    """

    pass


class InvalidModeError(MetacreateError, ValueError):
    """Raised for a weak retention mode outside the recognized spellings."""

    pass


class UnknownTrapError(MetacreateError, ValueError):
    """Raised in strict mode when a spec names a trap that is not recognized."""

    pass


class ConstructorError(MetacreateError):
    """Raised when a custom constructor cannot be registered or finalized."""

    pass
