"""
Async client for the portal API, with helpers that poll for new support
messages and order changes.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
import httpx
import logging

from portal.config import settings
from portal.utils.poller import Poller

logger = logging.getLogger(__name__)

MessagesCallback = Callable[[List[Dict[str, Any]]], Union[None, Awaitable[None]]]
OrderCallback = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]


class PortalAPIError(Exception):
    """Error response from the portal API."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(f"{status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


class PortalClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` for the customer and staff API.

    Usage::

        async with PortalClient("http://localhost:8000") as client:
            await client.login("agent@example.com", "password123")
            orders = await client.list_orders()
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        api_prefix: str = settings.api_v1_prefix,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_prefix = api_prefix
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "PortalClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self._http.request(method, f"{self.api_prefix}{path}", headers=headers, **kwargs)
        if response.status_code >= 400:
            try:
                error = response.json().get("error", {})
            except ValueError:
                error = {}
            raise PortalAPIError(
                response.status_code,
                error.get("code", f"HTTP_{response.status_code}"),
                error.get("message", response.text)
            )
        if response.status_code == 204:
            return None
        return response.json()

    # Accounts

    async def login(self, email: str, password: str, staff: bool = False) -> Dict[str, Any]:
        """Log in and keep the access token for later calls."""
        path = "/auth/admin/login" if staff else "/auth/login"
        payload = await self._request("POST", path, json={"email": email, "password": password})
        self.token = payload["access_token"]
        return payload

    # Orders

    async def list_orders(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {k: v for k, v in {"status": status, "search": search}.items() if v}
        payload = await self._request("GET", "/orders", params=params)
        return payload["orders"]

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/orders/{order_id}")

    async def get_timeline(self, order_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/orders/{order_id}/timeline")

    # Messages

    async def list_messages(self, since: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"since": since} if since else None
        return await self._request("GET", "/messages", params=params)

    async def send_message(self, content: str, order_id: Optional[str] = None) -> Dict[str, Any]:
        return await self._request("POST", "/messages", json={"content": content, "order_id": order_id})

    # Polling

    def watch_messages(
        self,
        on_messages: MessagesCallback,
        interval: float = settings.message_poll_interval
    ) -> Poller:
        """
        Poller delivering batches of messages newer than the last one seen.
        The first tick delivers the whole conversation; empty batches are skipped.
        """
        state: Dict[str, Optional[str]] = {"since": None}

        async def fetch() -> List[Dict[str, Any]]:
            messages = await self.list_messages(since=state["since"])
            if messages:
                state["since"] = messages[-1]["timestamp"]
            return messages

        async def deliver(messages: List[Dict[str, Any]]) -> None:
            if messages:
                result = on_messages(messages)
                if result is not None:
                    await result

        return Poller(fetch, on_result=deliver, interval=interval, name="messages")

    def watch_order(
        self,
        order_id: str,
        on_change: OrderCallback,
        interval: float = settings.order_poll_interval
    ) -> Poller:
        """
        Poller calling ``on_change`` whenever the order's status, payment
        status or deliverables differ from the previous fetch.
        """
        state: Dict[str, Any] = {"last": None}

        def fingerprint(order: Dict[str, Any]) -> tuple:
            return (
                order["status"],
                order["payment_status"],
                tuple(d["id"] for d in order.get("deliverables", [])),
            )

        async def deliver(order: Dict[str, Any]) -> None:
            current = fingerprint(order)
            if current == state["last"]:
                return
            state["last"] = current
            result = on_change(order)
            if result is not None:
                await result

        return Poller(lambda: self.get_order(order_id), on_result=deliver, interval=interval, name=f"order-{order_id}")
