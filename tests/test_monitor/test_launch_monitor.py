"""Tests for TokenLaunchMonitor lifecycle and worker pool."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from config.settings import Settings
from src.monitor.classifier import KeywordClassifier
from src.monitor.models import LaunchEvent
from src.monitor.monitor import TokenLaunchMonitor
from src.monitor.registry import TokenRegistry


def _event(n: int = 0) -> LaunchEvent:
    return LaunchEvent(signature=f"sig{n}", slot=n, platform="Raydium")


def _monitor(*, pipeline=None, workers: int = 2, queue_size: int = 10, timeout: float = 5.0):
    rpc = MagicMock()
    rpc.close = AsyncMock()
    subscriber = MagicMock()
    subscriber.run = AsyncMock()
    subscriber.stop = AsyncMock()
    if pipeline is None:
        pipeline = MagicMock()
        pipeline.process = AsyncMock(return_value=None)
    monitor = TokenLaunchMonitor(
        rpc=rpc,
        subscriber=subscriber,
        registry=TokenRegistry(),
        pipeline=pipeline,
        workers=workers,
        queue_size=queue_size,
        pipeline_timeout=timeout,
    )
    return monitor, rpc, subscriber, pipeline


class TestLifecycle:
    def test_wires_subscriber(self) -> None:
        monitor, _, subscriber, _ = _monitor()
        assert subscriber.on_launch == monitor.submit

    @pytest.mark.asyncio
    async def test_start_and_stop(self) -> None:
        monitor, rpc, subscriber, _ = _monitor()
        await monitor.start()
        await asyncio.sleep(0)
        subscriber.run.assert_awaited_once()

        await monitor.stop()
        subscriber.stop.assert_awaited_once()
        rpc.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self) -> None:
        monitor, _, subscriber, _ = _monitor(workers=1)
        await monitor.start()
        await monitor.start()
        await asyncio.sleep(0)
        assert subscriber.run.await_count == 1
        await monitor.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self) -> None:
        monitor, rpc, _, _ = _monitor()
        await monitor.stop()
        rpc.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_returns_after_stop(self) -> None:
        monitor, _, _, _ = _monitor()
        runner = asyncio.create_task(monitor.run())
        await asyncio.sleep(0.01)
        await monitor.stop()
        await asyncio.wait_for(runner, timeout=1.0)

    @pytest.mark.asyncio
    async def test_subscriber_crash_is_reported(self) -> None:
        monitor, _, subscriber, _ = _monitor(workers=1)
        subscriber.run = AsyncMock(side_effect=RuntimeError("handshake rejected"))
        with patch("src.monitor.monitor.logger") as log:
            await monitor.start()
            await asyncio.sleep(0.01)
            log.error.assert_called_once()
        assert isinstance(monitor.subscriber_error, RuntimeError)
        await monitor.stop()

    @pytest.mark.asyncio
    async def test_subscriber_cancel_on_stop_is_quiet(self) -> None:
        async def stream_forever() -> None:
            await asyncio.sleep(10)

        monitor, _, subscriber, _ = _monitor(workers=1)
        subscriber.run = stream_forever
        await monitor.start()
        await asyncio.sleep(0)
        await monitor.stop()
        assert monitor.subscriber_error is None

    def test_get_stats_reads_registry(self) -> None:
        monitor, _, _, _ = _monitor()
        assert monitor.get_stats().total_count == 0


class TestWorkers:
    @pytest.mark.asyncio
    async def test_events_processed(self) -> None:
        monitor, _, _, pipeline = _monitor()
        await monitor.start()
        for n in range(3):
            await monitor.submit(_event(n))
        await asyncio.wait_for(monitor._queue.join(), timeout=1.0)
        await monitor.stop()

        processed = sorted(call.args[0].signature for call in pipeline.process.await_args_list)
        assert processed == ["sig0", "sig1", "sig2"]

    @pytest.mark.asyncio
    async def test_full_queue_drops(self) -> None:
        monitor, _, _, _ = _monitor(queue_size=2)
        # Workers not started: nothing drains the queue
        for n in range(5):
            await monitor.submit(_event(n))
        assert monitor.queue_size == 2
        assert monitor.dropped_events == 3

    @pytest.mark.asyncio
    async def test_bounded_concurrency(self) -> None:
        active = 0
        peak = 0

        async def process(event: LaunchEvent) -> None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

        pipeline = MagicMock()
        pipeline.process = process
        monitor, _, _, _ = _monitor(pipeline=pipeline, workers=2, queue_size=20)
        await monitor.start()
        for n in range(8):
            await monitor.submit(_event(n))
        await asyncio.wait_for(monitor._queue.join(), timeout=2.0)
        await monitor.stop()

        assert peak == 2

    @pytest.mark.asyncio
    async def test_worker_survives_errors_and_timeouts(self) -> None:
        async def process(event: LaunchEvent) -> None:
            if event.signature == "sig0":
                raise RuntimeError("boom")
            if event.signature == "sig1":
                await asyncio.sleep(10)

        pipeline = MagicMock()
        pipeline.process = AsyncMock(side_effect=process)
        monitor, _, _, _ = _monitor(pipeline=pipeline, workers=1, timeout=0.05)
        await monitor.start()
        for n in range(3):
            await monitor.submit(_event(n))
        await asyncio.wait_for(monitor._queue.join(), timeout=2.0)
        await monitor.stop()

        assert pipeline.process.await_count == 3
        assert monitor.failed_events == 2


class TestFromSettings:
    def test_builds_components(self) -> None:
        settings = Settings(
            monitored_programs={"Pump.fun": "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"},
            launch_keywords=["create"],
            pipeline_workers=3,
            registry_max_tokens=5,
        )
        monitor = TokenLaunchMonitor.from_settings(settings, classifier=KeywordClassifier(["x"]))
        assert monitor.subscriber.on_launch == monitor.submit
        assert monitor.subscriber.client.on_logs == monitor.subscriber.handle_notification
        assert monitor._num_workers == 3
