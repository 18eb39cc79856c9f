import asyncio


class RateLimiter:
    """Spacing limiter for outgoing RPC requests.

    Each caller reserves the next free slot under the lock and sleeps
    outside it, so waiting callers don't hold up slot bookkeeping.
    ``max_rps <= 0`` disables limiting.
    """

    def __init__(self, max_rps: float) -> None:
        self._min_interval = 1.0 / max_rps if max_rps > 0 else 0.0
        self._next_slot = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        if self._min_interval == 0.0:
            return
        async with self._lock:
            now = asyncio.get_running_loop().time()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self._min_interval
        wait = slot - now
        if wait > 0:
            await asyncio.sleep(wait)
