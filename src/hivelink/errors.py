from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Status


class HiveError(Exception):
    """Base exception for hivelink."""

    pass


class RPCError(HiveError):
    """Raised when a remote call fails."""

    pass


class TransportError(RPCError):
    """Raised when the connection to the service cannot be established or used."""

    pass


class StatusError(HiveError):
    """
    Raised when a remote call succeeds at the transport level but reports a
    non-success status.
    """

    def __init__(self, message: str, status: Optional["Status"] = None):
        super().__init__(message)
        self.status = status


class ProtocolError(HiveError):
    """Raised when a reply violates the wire protocol."""

    pass


class InterfaceError(HiveError):
    """Raised when the client is used incorrectly, e.g. after close."""

    pass
