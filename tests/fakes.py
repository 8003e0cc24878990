"""In-memory fakes of the Playwright objects the recorder drives."""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Callable
from typing import Any


@dataclasses.dataclass
class FakeRequest:
    url: str
    method: str = "GET"
    resource_type: str = "document"


class FakeResponse:
    """Mimics the subset of ``playwright.async_api.Response`` the recorder uses."""

    def __init__(
        self,
        url: str,
        body: bytes = b"",
        *,
        status: int = 200,
        resource_type: str = "document",
        method: str = "GET",
        from_service_worker: bool = False,
        body_error: Exception | None = None,
        body_hangs: bool = False,
    ) -> None:
        self.url = url
        self.status = status
        self.request = FakeRequest(url=url, method=method, resource_type=resource_type)
        self.from_service_worker = from_service_worker
        self._body = body
        self._body_error = body_error
        self._body_hangs = body_hangs

    async def body(self) -> bytes:
        await asyncio.sleep(0)
        if self._body_hangs:
            await asyncio.Event().wait()
        if self._body_error is not None:
            raise self._body_error
        return self._body


class FakeCDPSession:
    """Records commands and dispatches events to registered handlers."""

    def __init__(self) -> None:
        self.handlers: dict[str, list[Callable[[dict[str, Any]], None]]] = {}
        self.sent: list[tuple[str, dict[str, Any] | None]] = []
        self.detached = False

    def on(self, event: str, handler: Callable[[dict[str, Any]], None]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    async def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        self.sent.append((method, params))
        return {}

    async def detach(self) -> None:
        self.detached = True

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        if self.detached:
            return
        for handler in list(self.handlers.get(event, [])):
            handler(payload)


@dataclasses.dataclass
class NetworkEntry:
    """One scripted network transfer replayed on every navigation."""

    response: FakeResponse
    encoded_data_length: int | None = None
    from_disk_cache: bool = False
    from_memory_cache: bool = False


class FakeContext:
    def __init__(self) -> None:
        self.cdp_sessions: list[FakeCDPSession] = []

    async def new_cdp_session(self, _page: Any) -> FakeCDPSession:
        session = FakeCDPSession()
        self.cdp_sessions.append(session)
        return session


class FakePage:
    """Replays scripted network entries on ``goto``/``reload``."""

    def __init__(self, entries: list[NetworkEntry] | None = None) -> None:
        self.context = FakeContext()
        self.entries = list(entries or [])
        self.listeners: dict[str, list[Callable[[Any], None]]] = {}
        self.navigations: list[tuple[str, str | None]] = []
        self.navigation_error: Exception | None = None
        self.scroll_result: dict[str, Any] = {"scrolled": 1000, "finalHeight": 1000, "shrinkCount": 0}
        self.evaluated: list[tuple[str, Any]] = []

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable[[Any], None]) -> None:
        self.listeners[event].remove(handler)

    async def goto(self, url: str, wait_until: str | None = None) -> None:
        self.navigations.append(("goto", url))
        await self._replay(wait_until)

    async def reload(self, wait_until: str | None = None) -> None:
        self.navigations.append(("reload", None))
        await self._replay(wait_until)

    async def evaluate(self, script: str, arg: Any = None) -> dict[str, Any]:
        self.evaluated.append((script, arg))
        return self.scroll_result

    async def _replay(self, wait_until: str | None) -> None:
        assert wait_until == "networkidle"
        if self.navigation_error is not None:
            raise self.navigation_error
        cdp = self.context.cdp_sessions[-1] if self.context.cdp_sessions else None
        for index, entry in enumerate(self.entries):
            request_id = f"req-{index}"
            if cdp is not None:
                if entry.from_memory_cache:
                    cdp.emit("Network.requestServedFromCache", {"requestId": request_id})
                cdp.emit(
                    "Network.responseReceived",
                    {
                        "requestId": request_id,
                        "response": {"url": entry.response.url, "fromDiskCache": entry.from_disk_cache},
                    },
                )
            for handler in list(self.listeners.get("response", [])):
                handler(entry.response)
            if cdp is not None and entry.encoded_data_length is not None:
                cdp.emit(
                    "Network.loadingFinished",
                    {"requestId": request_id, "encodedDataLength": entry.encoded_data_length},
                )
            await asyncio.sleep(0)


