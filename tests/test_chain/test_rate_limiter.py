"""Tests for the RPC request spacing limiter."""

import asyncio

import pytest

from src.chain.rate_limiter import RateLimiter


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_disabled(self) -> None:
        limiter = RateLimiter(0)
        loop = asyncio.get_running_loop()
        start = loop.time()
        for _ in range(50):
            await limiter.acquire()
        assert loop.time() - start < 0.05

    @pytest.mark.asyncio
    async def test_spaces_requests(self) -> None:
        limiter = RateLimiter(50.0)  # 20ms apart
        loop = asyncio.get_running_loop()
        start = loop.time()
        await asyncio.gather(*(limiter.acquire() for _ in range(4)))
        # first slot is immediate, the next three wait 20/40/60ms
        assert loop.time() - start >= 0.05
