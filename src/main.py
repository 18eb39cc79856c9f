"""Entry point for the launch-radar monitor."""

import asyncio
import signal

from loguru import logger

from config.settings import settings
from src.monitor.formatters import format_stats, format_token_report
from src.monitor.models import MonitoredToken
from src.monitor.monitor import TokenLaunchMonitor
from src.utils.logger import setup_logger


async def _log_token(token: MonitoredToken) -> None:
    logger.info("\n" + format_token_report(token))


def _log_stats(monitor: TokenLaunchMonitor, max_entries: int) -> None:
    client = monitor.subscriber.client
    logger.info(
        f"[STATS] WS state: {client.state.value} | messages: {client.message_count} | "
        f"launches: {monitor.subscriber.launch_count} | queue: {monitor.queue_size} | "
        f"dropped: {monitor.dropped_events}"
    )
    logger.info("\n" + format_stats(monitor.get_stats(), max_entries=max_entries))


async def _stats_reporter(monitor: TokenLaunchMonitor, interval: int) -> None:
    """Log registry stats every ``interval`` seconds."""
    while True:
        await asyncio.sleep(interval)
        _log_stats(monitor, settings.stats_max_entries)


async def main() -> None:
    setup_logger(json_logs=settings.json_logs, level=settings.log_level)
    logger.info("Starting token launch monitor...")
    logger.info(f"Connected to: {settings.solana_rpc_url}")
    logger.info(f"Watching: {', '.join(settings.monitored_programs)}")

    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    monitor = TokenLaunchMonitor.from_settings(settings, on_token=_log_token)
    await monitor.start()
    stats_task = asyncio.create_task(
        _stats_reporter(monitor, settings.stats_interval_sec), name="stats"
    )

    await shutdown_event.wait()

    stats_task.cancel()
    try:
        await stats_task
    except asyncio.CancelledError:
        pass
    await monitor.stop()
    _log_stats(monitor, settings.stats_max_entries)
    logger.info("Shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
