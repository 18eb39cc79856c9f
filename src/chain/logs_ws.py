"""WebSocket client for Solana logsSubscribe across several programs.

One connection carries one subscription per program. Each subscribe
request gets its own JSON-RPC id, so a rejected subscription is matched
back to its program and skipped while the others keep streaming.
Reconnects with exponential backoff and re-subscribes everything.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import websockets
from loguru import logger
from websockets.exceptions import WebSocketException

from src.chain.constants import COMMITMENT
from src.chain.models import LogNotification


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ACTIVE = "active"


class LogsSubscriptionClient:
    """logsSubscribe client keyed by platform label."""

    def __init__(
        self,
        ws_url: str,
        programs: dict[str, str],
        *,
        commitment: str = COMMITMENT,
        callback_timeout: float = 10.0,
    ) -> None:
        self._ws_url = ws_url
        self._programs = dict(programs)
        self._commitment = commitment
        self._callback_timeout = callback_timeout
        self._ws: Any = None
        self._state = ConnectionState.DISCONNECTED
        self._running = False
        self._reconnect_delay = 5.0
        self._max_reconnect_delay = 60.0
        self._message_count = 0

        # request id → platform, until the node answers the subscribe call
        self._pending_requests: dict[int, str] = {}
        # subscription id → platform
        self._subscriptions: dict[int, str] = {}
        self._failed_platforms: dict[str, str] = {}

        self.on_logs: Callable[[LogNotification], Awaitable[None]] | None = None
        self._pending_tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def message_count(self) -> int:
        return self._message_count

    @property
    def active_platforms(self) -> list[str]:
        return list(self._subscriptions.values())

    @property
    def failed_platforms(self) -> dict[str, str]:
        """Platforms whose subscription was rejected, with the error message."""
        return dict(self._failed_platforms)

    async def connect(self) -> None:
        """Connect and listen. Auto-reconnects on disconnect."""
        self._running = True
        while self._running:
            try:
                self._state = ConnectionState.CONNECTING
                async with websockets.connect(
                    self._ws_url,
                    ping_interval=30,
                    ping_timeout=10,
                    close_timeout=5,
                ) as ws:
                    self._ws = ws
                    self._state = ConnectionState.CONNECTED
                    self._reconnect_delay = 5.0
                    await self._subscribe_all()
                    self._state = ConnectionState.ACTIVE
                    logger.info(
                        f"[SUB] WS connected, {len(self._programs)} logsSubscribe requests sent"
                    )
                    await self._listen()
            except (
                WebSocketException,
                ConnectionError,
                OSError,
                TimeoutError,
            ) as e:
                logger.warning(f"[SUB] WS disconnected: {e}")
                self._reset_connection()
                if self._running:
                    logger.info(f"[SUB] Reconnecting in {self._reconnect_delay:.0f}s...")
                    await asyncio.sleep(self._reconnect_delay)
                    self._reconnect_delay = min(
                        self._reconnect_delay * 2, self._max_reconnect_delay
                    )
            else:
                # Server closed the stream cleanly; treat like a disconnect
                self._reset_connection()
                if self._running:
                    await asyncio.sleep(self._reconnect_delay)

    def _reset_connection(self) -> None:
        self._state = ConnectionState.DISCONNECTED
        self._ws = None
        self._pending_requests.clear()
        self._subscriptions.clear()

    def build_subscribe_requests(self) -> list[tuple[int, str, str]]:
        """(request id, platform, JSON payload) for every configured program."""
        requests = []
        for request_id, (platform, program_id) in enumerate(self._programs.items(), start=1):
            payload = json.dumps({
                "jsonrpc": "2.0",
                "id": request_id,
                "method": "logsSubscribe",
                "params": [
                    {"mentions": [program_id]},
                    {"commitment": self._commitment},
                ],
            })
            requests.append((request_id, platform, payload))
        return requests

    async def _subscribe_all(self) -> None:
        if not self._ws:
            return
        self._failed_platforms.clear()
        for request_id, platform, payload in self.build_subscribe_requests():
            self._pending_requests[request_id] = platform
            await self._ws.send(payload)

    async def _listen(self) -> None:
        if not self._ws:
            return

        async for message in self._ws:
            self._message_count += 1
            try:
                data = json.loads(message)
            except json.JSONDecodeError:
                continue
            if not isinstance(data, dict):
                continue
            notification = self.handle_message(data)
            if notification is not None:
                self._dispatch(notification)

    def handle_message(self, data: dict[str, Any]) -> LogNotification | None:
        """Process one decoded frame.

        Subscribe replies update the subscription table; log notifications
        for successful transactions are returned for dispatch.
        """
        request_id = data.get("id")
        if request_id is not None and request_id in self._pending_requests:
            platform = self._pending_requests.pop(request_id)
            if "error" in data:
                error = data["error"]
                message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
                self._failed_platforms[platform] = message
                logger.error(f"[SUB] Subscription failed for {platform}: {message}")
                return None
            subscription_id = data.get("result")
            if isinstance(subscription_id, int):
                self._subscriptions[subscription_id] = platform
                logger.info(f"[SUB] Subscribed to {platform} (ID: {subscription_id})")
            return None

        if data.get("method") != "logsNotification":
            return None

        params = data.get("params") or {}
        platform = self._subscriptions.get(params.get("subscription"))
        if platform is None:
            return None

        result = params.get("result") or {}
        value = result.get("value") or {}
        signature = value.get("signature")
        logs = value.get("logs") or []
        if not signature or not logs or value.get("err"):
            return None

        return LogNotification(
            platform=platform,
            program_id=self._programs[platform],
            signature=signature,
            slot=(result.get("context") or {}).get("slot", 0),
            logs=logs,
        )

    def _dispatch(self, notification: LogNotification) -> None:
        if not self.on_logs:
            return
        task = asyncio.create_task(self._safe_callback(self.on_logs, notification))
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)

    async def _safe_callback(
        self, callback: Callable[[LogNotification], Awaitable[None]], event: LogNotification
    ) -> None:
        try:
            await asyncio.wait_for(callback(event), timeout=self._callback_timeout)
        except asyncio.TimeoutError:
            logger.error(f"[SUB] Callback timed out for {event.signature[:16]}")
        except Exception as e:
            logger.error(f"[SUB] Callback error: {e}")

    async def stop(self) -> None:
        self._running = False
        if self._ws:
            await self._ws.close()
            self._ws = None
        self._state = ConnectionState.DISCONNECTED
