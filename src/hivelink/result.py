import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, AsyncIterator, List, Optional, Tuple, TYPE_CHECKING

from .config import Options
from .errors import InterfaceError, ProtocolError, StatusError
from .models import ColumnSchema, DataType, OperationState, Status
from .operation import Operation, OperationPoller
from .status import check_status

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)

Row = Tuple[Any, ...]


class RowSet:
    """
    Reads the rows of one operation in batches of options.batch_size.

    Nothing is sent to the server until rows are requested: the first request
    waits for the operation to reach a terminal state, then rows are fetched
    one batch at a time as the caller consumes them. A RowSet can be read
    only once.
    """

    def __init__(
        self,
        session: "Session",
        operation: Operation,
        options: Options,
        poller: OperationPoller,
    ):
        self._session = session
        self.operation = operation
        self.batch_size = options.batch_size
        self._poller = poller
        self.schema: Optional[List[ColumnSchema]] = None
        self._started = False

    @property
    def state(self) -> OperationState:
        return self.operation.state

    async def poll(self) -> OperationState:
        """
        Checks the operation status once without waiting.
        """
        return await self._poller.poll_once(self.operation)

    async def wait(self) -> OperationState:
        """
        Waits until the operation is finished, failed or canceled.
        """
        return await self._poller.wait_until_terminal(self.operation)

    def rows(self) -> AsyncIterator[Row]:
        if self._started:
            raise InterfaceError("RowSet has already been read")
        self._started = True
        return self._iter_rows()

    def __aiter__(self) -> AsyncIterator[Row]:
        return self.rows()

    async def fetchall(self) -> List[Row]:
        return [row async for row in self.rows()]

    async def _iter_rows(self) -> AsyncIterator[Row]:
        state = await self.wait()
        if not state.is_finished():
            message = self.operation.error_message or "no error message"
            raise StatusError(
                f"Operation {self.operation.handle.guid} ended as {state.value}: {message}",
                self.operation.last_status,
            )

        while True:
            batch, has_more = await self._fetch_batch()
            for row in batch:
                yield row
            if not batch or not has_more:
                return

    async def _fetch_batch(self) -> Tuple[List[Row], bool]:
        rpc = self._session._require_open("fetch results")
        resp = await rpc.fetch_results(self.operation.handle, self.batch_size)
        check_status(Status.from_wire(resp.get("status")), "FetchResults")

        results = resp.get("results") or {}
        if self.schema is None and results.get("schema"):
            self.schema = self._parse_schema(results["schema"])

        rows = [self._convert_row(raw) for raw in results.get("rows") or []]
        has_more = bool(resp.get("has_more_rows", False))
        logger.debug(
            "Fetched %d rows for operation %s (has_more_rows=%s)",
            len(rows), self.operation.handle.guid, has_more,
        )
        return rows, has_more

    def _parse_schema(self, fields_data: Any) -> List[ColumnSchema]:
        fields = []
        for f in fields_data:
            # Unnamed columns still occupy a position in every row.
            name = f.get("name") or ""
            dtype_str = f.get("type") or f.get("data_type")
            fields.append(ColumnSchema(name, DataType.parse(dtype_str)))
        return fields

    def _convert_row(self, raw: Any) -> Row:
        if not isinstance(raw, (list, tuple)):
            raise ProtocolError(f"Expected a row array, got {type(raw).__name__}")
        if self.schema is None:
            return tuple(raw)
        if len(raw) != len(self.schema):
            raise ProtocolError("Schema length does not match record length")
        return tuple(
            _convert_value(v, column.type) for v, column in zip(raw, self.schema)
        )


def _convert_value(v: Any, typ: DataType) -> Any:
    # Values already decoded by JSON are kept; string-encoded ones are coerced.
    if v is None or not isinstance(v, str):
        return v

    if typ in (DataType.TINYINT, DataType.SMALLINT, DataType.INT, DataType.BIGINT):
        return int(v)
    elif typ in (DataType.FLOAT, DataType.DOUBLE):
        return float(v)
    elif typ == DataType.DECIMAL:
        try:
            return Decimal(v)
        except InvalidOperation:
            return v
    elif typ == DataType.BOOLEAN:
        return v.lower() == "true"
    elif typ == DataType.TIMESTAMP:
        try:
            return datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError:
            return v  # Return as string if parse fails
    elif typ == DataType.DATE:
        try:
            return date.fromisoformat(v)
        except ValueError:
            return v

    return v
