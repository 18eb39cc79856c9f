"""TokenLaunchMonitor: owns subscriptions, worker pool and registry.

Lifecycle: construct → start() → stop(). Launch events go through a
bounded queue to a fixed number of pipeline workers; when the queue is
full new events are dropped and counted rather than spawning unbounded
tasks.
"""

import asyncio

from loguru import logger

from config.settings import Settings
from src.chain.logs_ws import LogsSubscriptionClient
from src.chain.rpc_client import SolanaRpcClient
from src.monitor.classifier import KeywordClassifier, LaunchClassifier
from src.monitor.extractor import TokenInfoExtractor
from src.monitor.models import LaunchEvent, RegistryStats
from src.monitor.pipeline import LaunchPipeline, TokenCallback
from src.monitor.registry import TokenRegistry
from src.monitor.resolver import TransactionResolver
from src.monitor.safety_checks import SafetyCheckEngine
from src.monitor.subscriber import EventSubscriber


class TokenLaunchMonitor:
    def __init__(
        self,
        *,
        rpc: SolanaRpcClient,
        subscriber: EventSubscriber,
        registry: TokenRegistry,
        pipeline: LaunchPipeline,
        workers: int = 5,
        queue_size: int = 1000,
        pipeline_timeout: float = 60.0,
    ) -> None:
        self._rpc = rpc
        self._subscriber = subscriber
        self._registry = registry
        self._pipeline = pipeline
        self._num_workers = max(1, workers)
        self._pipeline_timeout = pipeline_timeout
        self._queue: asyncio.Queue[LaunchEvent] = asyncio.Queue(maxsize=max(1, queue_size))
        self._tasks: list[asyncio.Task] = []
        self._started = False
        self._stopped = asyncio.Event()
        self.dropped_events = 0
        self.failed_events = 0
        self.subscriber_error: BaseException | None = None

        subscriber.on_launch = self.submit

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        classifier: LaunchClassifier | None = None,
        on_token: TokenCallback | None = None,
    ) -> "TokenLaunchMonitor":
        rpc = SolanaRpcClient(
            settings.solana_rpc_url,
            timeout=settings.rpc_timeout_sec,
            max_retries=settings.rpc_max_retries,
            retry_delays=settings.rpc_retry_delays,
            max_rps=settings.rpc_max_rps,
        )
        ws_client = LogsSubscriptionClient(settings.solana_ws_url, settings.monitored_programs)
        subscriber = EventSubscriber(
            ws_client, classifier or KeywordClassifier(settings.launch_keywords)
        )
        registry = TokenRegistry(max_tokens=settings.registry_max_tokens)
        pipeline = LaunchPipeline(
            TransactionResolver(rpc),
            TokenInfoExtractor(rpc),
            SafetyCheckEngine(rpc, max_top_holder_pct=settings.max_top_holder_pct),
            registry,
            on_token=on_token,
        )
        return cls(
            rpc=rpc,
            subscriber=subscriber,
            registry=registry,
            pipeline=pipeline,
            workers=settings.pipeline_workers,
            queue_size=settings.pipeline_queue_size,
            pipeline_timeout=settings.pipeline_timeout_sec,
        )

    @property
    def registry(self) -> TokenRegistry:
        return self._registry

    @property
    def subscriber(self) -> EventSubscriber:
        return self._subscriber

    @property
    def pipeline(self) -> LaunchPipeline:
        return self._pipeline

    @property
    def queue_size(self) -> int:
        return self._queue.qsize()

    def get_stats(self) -> RegistryStats:
        return self._registry.stats()

    async def submit(self, event: LaunchEvent) -> None:
        """Queue a launch for the worker pool, dropping it if the queue is full."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped_events += 1
            logger.warning(
                f"[MONITOR] Queue full ({self._queue.maxsize}), dropped {event.signature[:16]}"
            )

    async def start(self) -> None:
        if self._started:
            logger.warning("[MONITOR] start() called twice, ignoring")
            return
        self._started = True
        self._stopped.clear()

        for idx in range(self._num_workers):
            self._tasks.append(
                asyncio.create_task(self._worker(idx), name=f"launch_worker_{idx}")
            )
        subscriber_task = asyncio.create_task(self._subscriber.run(), name="logs_subscriber")
        subscriber_task.add_done_callback(self._on_subscriber_done)
        self._tasks.append(subscriber_task)
        logger.info(f"[MONITOR] Started: {self._num_workers} pipeline workers")

    async def run(self) -> None:
        """Start and block until stop() is called."""
        await self.start()
        await self._stopped.wait()

    async def stop(self) -> None:
        if not self._started:
            return
        self._started = False

        await self._subscriber.stop()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        await self._rpc.close()
        self._stopped.set()
        logger.info("[MONITOR] Stopped")

    def _on_subscriber_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or not self._started:
            return
        exc = task.exception()
        if exc is not None:
            self.subscriber_error = exc
            logger.error(f"[MONITOR] Log subscriber crashed, no launches will arrive: {exc!r}")
        else:
            logger.warning("[MONITOR] Log subscriber exited before stop()")

    async def _worker(self, idx: int) -> None:
        while True:
            event = await self._queue.get()
            try:
                await asyncio.wait_for(
                    self._pipeline.process(event), timeout=self._pipeline_timeout
                )
            except asyncio.TimeoutError:
                self.failed_events += 1
                logger.error(
                    f"[MONITOR] worker {idx}: pipeline timed out for {event.signature[:16]}"
                )
            except Exception as e:
                self.failed_events += 1
                logger.error(f"[MONITOR] worker {idx}: error processing launch: {e}")
            finally:
                self._queue.task_done()
