import asyncio
import logging
from typing import Awaitable, Callable, Optional, TYPE_CHECKING

from .models import Handle, OperationState, Status
from .status import StatusClass, check_status

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class Operation:
    """
    A handle to a statement that has been submitted to the service.
    """

    def __init__(self, handle: Handle, statement: str):
        self.handle = handle
        self.statement = statement
        self.state = OperationState.PENDING
        self.error_message: Optional[str] = None
        self.last_status: Optional[Status] = None

    def __repr__(self) -> str:
        return f"Operation(guid={self.handle.guid!r}, state={self.state.value})"


class OperationPoller:
    """
    Drives an Operation from submission to a terminal state by asking the
    service for its status every poll_interval seconds.
    """

    def __init__(
        self,
        session: "Session",
        poll_interval: float,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self._session = session
        self.poll_interval = poll_interval
        self._sleep = sleep

    async def poll_once(self, operation: Operation) -> OperationState:
        """
        Issues a single status call and records the result on the operation.
        """
        if operation.state.is_terminated():
            return operation.state

        rpc = self._session._require_open("poll operation status")
        resp = await rpc.get_operation_status(operation.handle)
        status = Status.from_wire(resp.get("status"))
        operation.last_status = status

        if check_status(status, "GetOperationStatus", allow_pending=True) == StatusClass.PENDING:
            # The server has not decided yet; keep the previous state.
            logger.debug("Operation %s still executing", operation.handle.guid)
            return operation.state

        operation.state = OperationState.parse(resp.get("operation_state"))
        if resp.get("error_message"):
            operation.error_message = resp["error_message"]
        logger.debug("Operation %s is %s", operation.handle.guid, operation.state.value)
        return operation.state

    async def wait_until_terminal(self, operation: Operation) -> OperationState:
        """
        Polls until the operation is finished, failed or canceled. There is no
        timeout; errors from the status call end the wait.
        """
        while True:
            state = await self.poll_once(operation)
            if state.is_terminated():
                return state
            await self._sleep(self.poll_interval)
