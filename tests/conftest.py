import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from hivelink import Options


def ok(**fields: Any) -> Dict[str, Any]:
    return {"status": {"status_code": 0}, **fields}


class FakeHiveServer:
    """In-process stand-in for the query service behind httpx.MockTransport."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.open_reply: Dict[str, Any] = ok(
            server_protocol_version=10,
            session_handle={"guid": "session-1", "secret": "s"},
        )
        self.close_reply: Dict[str, Any] = ok()
        self.execute_reply: Dict[str, Any] = ok(
            operation_handle={"guid": "op-1", "secret": "o"}
        )
        # Replies to GetOperationStatus, consumed in order; the last one repeats.
        self.status_replies: List[Dict[str, Any]] = [ok(operation_state="finished")]
        self.schema: Optional[List[Dict[str, str]]] = None
        self.rows: List[List[Any]] = []
        self.fetch_error: Optional[int] = None
        self.fetch_error_after: int = 0
        # Report more rows even after the cursor is exhausted.
        self.always_has_more: bool = False
        self.http_errors: Dict[str, int] = {}
        self._cursor = 0
        self._fetches = 0

    def methods(self) -> List[str]:
        return [c["method"] for c in self.calls]

    def payloads(self, method: str) -> List[Dict[str, Any]]:
        return [c["payload"] for c in self.calls if c["method"] == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        payload = json.loads(request.content or b"{}")
        self.calls.append({"method": method, "payload": payload, "path": request.url.path})

        if method in self.http_errors:
            return httpx.Response(self.http_errors[method], text=f"{method} broke")

        if method == "OpenSession":
            return httpx.Response(200, json=self.open_reply)
        if method == "CloseSession":
            return httpx.Response(200, json=self.close_reply)
        if method == "ExecuteStatement":
            return httpx.Response(200, json=self.execute_reply)
        if method == "GetOperationStatus":
            reply = self.status_replies[0]
            if len(self.status_replies) > 1:
                self.status_replies.pop(0)
            return httpx.Response(200, json=reply)
        if method == "FetchResults":
            return self._fetch(payload["max_rows"])
        return httpx.Response(404, text=f"unknown method {method}")

    def _fetch(self, max_rows: int) -> httpx.Response:
        self._fetches += 1
        if self.fetch_error is not None and self._fetches > self.fetch_error_after:
            return httpx.Response(self.fetch_error, text="fetch broke")
        batch = self.rows[self._cursor : self._cursor + max_rows]
        self._cursor += len(batch)
        results: Dict[str, Any] = {"rows": batch}
        if self.schema is not None:
            results["schema"] = self.schema
        return httpx.Response(
            200,
            json=ok(
                has_more_rows=self.always_has_more or self._cursor < len(self.rows),
                results=results,
            ),
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def server():
    return FakeHiveServer()


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def options():
    return Options(poll_interval=0.5, batch_size=2)
