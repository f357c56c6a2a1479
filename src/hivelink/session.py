import asyncio
import logging
from typing import Any, Optional

import httpx

from .config import DEFAULT_OPTIONS, Options
from .errors import InterfaceError
from .models import Handle, Status
from .operation import Operation, OperationPoller, SleepFunc
from .result import RowSet
from .rpc import RPCClient
from .status import check_status

logger = logging.getLogger(__name__)


def _base_url(host: str) -> str:
    if "://" in host:
        return host
    return f"http://{host}"


class Session:
    """
    An open session on the query service.

    The session owns its RPC client. Every RowSet it produces borrows that
    client and stops working once the session is closed.
    """

    def __init__(
        self,
        rpc: RPCClient,
        handle: Handle,
        options: Options,
        server_protocol_version: Optional[int] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self._rpc = rpc
        self.handle: Optional[Handle] = handle
        self.options = options
        self.server_protocol_version = server_protocol_version
        self._sleep = sleep

    @classmethod
    async def connect(
        cls,
        host: str,
        options: Options = DEFAULT_OPTIONS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> "Session":
        """
        Opens a session on the service at host. Either a usable session is
        returned or the HTTP client is released and the error is raised.
        """
        rpc = RPCClient(_base_url(host), options, transport=transport)
        try:
            resp = await rpc.open_session(options.username, dict(options.configuration))
            check_status(Status.from_wire(resp.get("status")), "OpenSession")
            handle = Handle.from_wire(resp.get("session_handle"), "session")
        except BaseException:
            await rpc.aclose()
            raise

        version = resp.get("server_protocol_version")
        logger.info("Opened session %s on %s (protocol %s)", handle.guid, rpc.base_url, version)
        return cls(rpc, handle, options, server_protocol_version=version, sleep=sleep)

    @property
    def is_open(self) -> bool:
        return self.handle is not None

    def _require_open(self, action: str) -> RPCClient:
        if self.handle is None or self._rpc.closed:
            raise InterfaceError(f"Cannot {action}: session is closed")
        return self._rpc

    async def close(self) -> None:
        """
        Closes the session. Closing a closed session does nothing. The session
        is unusable afterwards even if the close call itself fails.
        """
        if self.handle is None:
            return

        handle, self.handle = self.handle, None
        try:
            resp = await self._rpc.close_session(handle)
            check_status(Status.from_wire(resp.get("status")), "CloseSession")
        except Exception as e:
            logger.error("Closing session %s failed: %s", handle.guid, e)
            raise
        finally:
            await self._rpc.aclose()
        logger.info("Closed session %s", handle.guid)

    async def submit(self, statement: str) -> Operation:
        """
        Submits a statement for asynchronous execution.
        """
        rpc = self._require_open("submit a statement")
        assert self.handle is not None

        logger.debug("Submitting statement on session %s: %s", self.handle.guid, statement)
        resp = await rpc.execute_statement(self.handle, statement)
        # A submit is either accepted or not; STILL_EXECUTING is not an answer here.
        check_status(Status.from_wire(resp.get("status")), "ExecuteStatement")
        handle = Handle.from_wire(resp.get("operation_handle"), "operation")
        return Operation(handle, statement)

    async def query(self, statement: str) -> RowSet:
        """
        Submits a statement and returns a RowSet for its results. The RowSet
        does not poll until rows are requested.
        """
        operation = await self.submit(statement)
        poller = OperationPoller(self, self.options.poll_interval, sleep=self._sleep)
        return RowSet(self, operation, self.options, poller)

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def open(
    host: str,
    options: Options = DEFAULT_OPTIONS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> Session:
    """
    Opens a session on the service at host, e.g. open("hive:10000").
    """
    return await Session.connect(host, options, transport=transport, sleep=sleep)
