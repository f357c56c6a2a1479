import logging
from typing import Any, Dict, Optional

import httpx

from .config import Options
from .errors import InterfaceError, ProtocolError, RPCError, TransportError
from .models import Handle

logger = logging.getLogger(__name__)

CLIENT_PROTOCOL_VERSION = 10


class RPCClient:
    """
    JSON-over-HTTP binding of the query service's remote calls.
    """

    def __init__(
        self,
        base_url: str,
        options: Options,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._path = options.http_path.strip("/")
        self._client: Optional[httpx.AsyncClient] = httpx.AsyncClient(
            base_url=self.base_url, timeout=options.timeout, transport=transport
        )

    @property
    def closed(self) -> bool:
        return self._client is None

    async def aclose(self) -> None:
        """
        Close the HTTP client.
        """
        if self._client:
            await self._client.aclose()
            self._client = None

    async def call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Issues one remote call and returns the decoded reply.
        """
        if self._client is None:
            raise InterfaceError(f"RPC client is closed, cannot call {method}")

        url = f"/{self._path}/{method}" if self._path else f"/{method}"
        logger.debug("RPC %s -> %s%s", method, self.base_url, url)
        try:
            resp = await self._client.post(url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RPCError(f"{method} failed: {e.response.status_code} {e.response.text}") from e
        except httpx.TransportError as e:
            raise TransportError(f"Network error during {method}: {e}") from e
        except httpx.HTTPError as e:
            raise RPCError(f"{method} failed: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise ProtocolError(f"{method} returned a non-JSON reply") from e
        if not isinstance(body, dict):
            raise ProtocolError(f"{method} returned {type(body).__name__}, expected an object")
        return body

    async def open_session(
        self, username: Optional[str], configuration: Dict[str, str]
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "client_protocol": CLIENT_PROTOCOL_VERSION,
            "configuration": dict(configuration),
        }
        if username:
            payload["username"] = username
        return await self.call("OpenSession", payload)

    async def close_session(self, session: Handle) -> Dict[str, Any]:
        return await self.call("CloseSession", {"session_handle": session.to_wire()})

    async def execute_statement(self, session: Handle, statement: str) -> Dict[str, Any]:
        return await self.call(
            "ExecuteStatement",
            {
                "session_handle": session.to_wire(),
                "statement": statement,
                "run_async": True,
                "conf_overlay": {},
            },
        )

    async def get_operation_status(self, operation: Handle) -> Dict[str, Any]:
        return await self.call("GetOperationStatus", {"operation_handle": operation.to_wire()})

    async def fetch_results(self, operation: Handle, max_rows: int) -> Dict[str, Any]:
        return await self.call(
            "FetchResults",
            {
                "operation_handle": operation.to_wire(),
                "orientation": "FETCH_NEXT",
                "max_rows": max_rows,
            },
        )
