"""Async JSON-RPC client for the Solana HTTP endpoint.

Covers the handful of read calls the launch pipeline needs:
getTransaction, getAccountInfo (raw and jsonParsed) and
getTokenLargestAccounts. Every call has a bounded timeout and a small
retry budget; failures surface as RpcError.
"""

import asyncio
import base64
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from src.chain.constants import COMMITMENT
from src.chain.rate_limiter import RateLimiter

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class RpcError(Exception):
    """RPC call failed (HTTP error, JSON-RPC error object, or transport)."""

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        super().__init__(f"{method}: {message}")


@dataclass(frozen=True)
class AccountInfo:
    """Raw account state as returned by getAccountInfo (base64)."""

    address: str
    owner: str
    lamports: int
    data: bytes
    executable: bool = False


class SolanaRpcClient:
    """Shared, read-only chain client used by every pipeline task."""

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float = 15.0,
        max_retries: int = 2,
        retry_delays: Sequence[float] = (1.0, 3.0),
        max_rps: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._max_retries = max(0, max_retries)
        self._retry_delays = list(retry_delays) or [1.0]
        self._rate_limiter = RateLimiter(max_rps)
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    async def close(self) -> None:
        await self._client.aclose()

    def _retry_delay(self, attempt: int) -> float:
        return self._retry_delays[min(attempt, len(self._retry_delays) - 1)]

    async def _call(self, method: str, params: list[Any]) -> Any:
        """POST one JSON-RPC request and return its ``result`` field."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        for attempt in range(self._max_retries + 1):
            last_attempt = attempt >= self._max_retries
            try:
                await self._rate_limiter.acquire()
                resp = await self._client.post(self._rpc_url, json=payload)
            except httpx.TransportError as e:
                if last_attempt:
                    raise RpcError(method, f"{type(e).__name__}: {e}") from e
                logger.debug(f"[RPC] {method} transport error (attempt {attempt + 1}): {e}")
                await asyncio.sleep(self._retry_delay(attempt))
                continue

            if resp.status_code in RETRYABLE_STATUS and not last_attempt:
                logger.debug(f"[RPC] {method} HTTP {resp.status_code}, retrying")
                await asyncio.sleep(self._retry_delay(attempt))
                continue
            if resp.status_code != 200:
                raise RpcError(method, f"HTTP {resp.status_code}")

            try:
                data = resp.json()
            except ValueError as e:
                raise RpcError(method, "invalid JSON response") from e

            error = data.get("error")
            if error:
                message = error.get("message", error) if isinstance(error, dict) else error
                raise RpcError(method, str(message))
            return data.get("result")

        raise RpcError(method, "retries exhausted")

    async def get_transaction(self, signature: str) -> dict[str, Any] | None:
        """Fetch a confirmed transaction, accepting v0 transactions."""
        return await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "commitment": COMMITMENT,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )

    async def get_account_info(self, address: str) -> AccountInfo | None:
        """Fetch raw account state. Returns None if the account does not exist."""
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": COMMITMENT}],
        )
        value = (result or {}).get("value")
        if not value:
            return None

        raw = value.get("data")
        if isinstance(raw, list):
            raw = raw[0] if raw else ""
        try:
            data = base64.b64decode(raw or "")
        except ValueError as e:
            raise RpcError("getAccountInfo", f"undecodable data for {address}") from e

        return AccountInfo(
            address=address,
            owner=value.get("owner", ""),
            lamports=value.get("lamports", 0),
            data=data,
            executable=bool(value.get("executable", False)),
        )

    async def get_parsed_account_info(self, address: str) -> dict[str, Any] | None:
        """Fetch jsonParsed account state (the ``value`` object) or None."""
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "jsonParsed", "commitment": COMMITMENT}],
        )
        return (result or {}).get("value")

    async def get_token_largest_accounts(self, mint: str) -> list[dict[str, Any]]:
        """Largest token accounts for a mint, biggest first."""
        result = await self._call(
            "getTokenLargestAccounts",
            [mint, {"commitment": COMMITMENT}],
        )
        return list((result or {}).get("value") or [])
