"""Event subscriber: turn program log notifications into LaunchEvents."""

from collections.abc import Awaitable, Callable

from loguru import logger

from src.chain.logs_ws import LogsSubscriptionClient
from src.chain.models import LogNotification
from src.monitor.classifier import LaunchClassifier
from src.monitor.models import LaunchEvent


class EventSubscriber:
    """Classifies notifications from the logs client and emits launches."""

    def __init__(
        self,
        client: LogsSubscriptionClient,
        classifier: LaunchClassifier,
    ) -> None:
        self._client = client
        self._classifier = classifier
        self._notifications = 0
        self._launches = 0

        self.on_launch: Callable[[LaunchEvent], Awaitable[None]] | None = None
        client.on_logs = self.handle_notification

    @property
    def client(self) -> LogsSubscriptionClient:
        return self._client

    @property
    def notification_count(self) -> int:
        return self._notifications

    @property
    def launch_count(self) -> int:
        return self._launches

    def classify(self, notification: LogNotification) -> LaunchEvent | None:
        if not self._classifier.is_launch(notification.logs):
            return None
        return LaunchEvent(
            signature=notification.signature,
            slot=notification.slot,
            platform=notification.platform,
            logs=list(notification.logs),
        )

    async def handle_notification(self, notification: LogNotification) -> None:
        self._notifications += 1
        event = self.classify(notification)
        if event is None:
            return

        self._launches += 1
        logger.info(
            f"[SUB] New launch on {event.platform}: sig={event.signature[:16]} slot={event.slot}"
        )
        if self.on_launch:
            await self.on_launch(event)

    async def run(self) -> None:
        """Subscribe to every configured program and stream until stopped."""
        await self._client.connect()

    async def stop(self) -> None:
        await self._client.stop()
