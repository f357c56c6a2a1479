from .config import Options, DEFAULT_OPTIONS
from .errors import (
    HiveError,
    TransportError,
    RPCError,
    StatusError,
    ProtocolError,
    InterfaceError,
)
from .models import (
    StatusCode,
    OperationState,
    DataType,
    Handle,
    Status,
    ColumnSchema,
)
from .operation import Operation, OperationPoller
from .result import RowSet, Row
from .rpc import RPCClient
from .session import Session, open
from .status import StatusClass, classify, is_success

__all__ = [
    "Options",
    "DEFAULT_OPTIONS",
    "HiveError",
    "TransportError",
    "RPCError",
    "StatusError",
    "ProtocolError",
    "InterfaceError",
    "StatusCode",
    "OperationState",
    "DataType",
    "Handle",
    "Status",
    "ColumnSchema",
    "Operation",
    "OperationPoller",
    "RowSet",
    "Row",
    "RPCClient",
    "Session",
    "StatusClass",
    "classify",
    "is_success",
]
