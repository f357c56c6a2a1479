from enum import Enum, IntEnum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ProtocolError

class StatusCode(IntEnum):
    UNKNOWN = -1
    SUCCESS = 0
    SUCCESS_WITH_INFO = 1
    STILL_EXECUTING = 2
    ERROR = 3
    INVALID_HANDLE = 4

    @classmethod
    def parse(cls, value: Any) -> "StatusCode":
        # Codes this client does not know yet land on UNKNOWN, never on a success arm.
        # Only real integers are looked up: 0.5 or true must not coerce to SUCCESS.
        if isinstance(value, bool) or not isinstance(value, int):
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

class OperationState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    FINISHED = "finished"
    ERROR = "error"
    CANCELED = "canceled"

    @classmethod
    def parse(cls, value: Any) -> "OperationState":
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.ERROR

    def is_finished(self) -> bool:
        return self == OperationState.FINISHED

    def is_terminated(self) -> bool:
        return self in (
            OperationState.FINISHED,
            OperationState.ERROR,
            OperationState.CANCELED,
        )

class DataType(str, Enum):
    BOOLEAN = "BOOLEAN"
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INT = "INT"
    BIGINT = "BIGINT"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    STRING = "STRING"
    VARCHAR = "VARCHAR"
    CHAR = "CHAR"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    BINARY = "BINARY"
    ARRAY = "ARRAY"
    MAP = "MAP"
    STRUCT = "STRUCT"
    NULL = "NULL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "DataType":
        # "DECIMAL(10,2)" and "VARCHAR(64)" carry parameters we don't need.
        name = str(value).upper().split("(", 1)[0].strip()
        if name.endswith("_TYPE"):
            name = name[: -len("_TYPE")]
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN

@dataclass(frozen=True)
class Handle:
    guid: str
    secret: str = ""

    @classmethod
    def from_wire(cls, data: Any, what: str) -> "Handle":
        if not isinstance(data, dict) or not data.get("guid"):
            raise ProtocolError(f"Missing {what} handle in server reply")
        return cls(guid=str(data["guid"]), secret=str(data.get("secret", "")))

    def to_wire(self) -> Dict[str, str]:
        return {"guid": self.guid, "secret": self.secret}

@dataclass
class Status:
    code: StatusCode
    raw_code: Any = None
    error_message: Optional[str] = None
    sql_state: Optional[str] = None
    error_code: Optional[int] = None
    info_messages: List[str] = field(default_factory=list)

    @classmethod
    def from_wire(cls, data: Any) -> "Status":
        if not isinstance(data, dict):
            raise ProtocolError("Missing status in server reply")
        raw = data.get("status_code")
        info = data.get("info_messages") or []
        if isinstance(info, str):
            info = [info]
        return cls(
            code=StatusCode.parse(raw),
            raw_code=raw,
            error_message=data.get("error_message"),
            sql_state=data.get("sql_state"),
            error_code=data.get("error_code"),
            info_messages=list(info),
        )

    def __str__(self) -> str:
        parts = [f"{self.code.name}({self.raw_code})"]
        if self.sql_state:
            parts.append(f"sql_state={self.sql_state}")
        if self.error_code is not None:
            parts.append(f"error_code={self.error_code}")
        if self.error_message:
            parts.append(self.error_message)
        return " ".join(parts)

@dataclass
class ColumnSchema:
    name: str
    type: DataType
