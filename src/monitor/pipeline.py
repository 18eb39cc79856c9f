"""Launch pipeline: resolve → extract → safety checks → score → registry."""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from loguru import logger

from src.monitor.extractor import TokenInfoExtractor
from src.monitor.models import LaunchEvent, MonitoredToken
from src.monitor.registry import TokenRegistry
from src.monitor.resolver import TransactionResolver
from src.monitor.safety_checks import SafetyCheckEngine
from src.monitor.scorer import apply_score

TokenCallback = Callable[[MonitoredToken], Awaitable[None]]


class LaunchPipeline:
    """Processes one LaunchEvent end to end.

    Never raises for per-event problems: a missing transaction or mint ends
    the run with None and no registry write.
    """

    def __init__(
        self,
        resolver: TransactionResolver,
        extractor: TokenInfoExtractor,
        engine: SafetyCheckEngine,
        registry: TokenRegistry,
        on_token: TokenCallback | None = None,
    ) -> None:
        self._resolver = resolver
        self._extractor = extractor
        self._engine = engine
        self._registry = registry
        self.on_token = on_token

        self.processed = 0
        self.no_transaction = 0
        self.no_mint = 0

    async def process(self, event: LaunchEvent) -> MonitoredToken | None:
        tx = await self._resolver.resolve(event.signature)
        if tx is None:
            self.no_transaction += 1
            logger.info(f"[PIPE] Could not fetch transaction details for {event.signature[:16]}")
            return None

        token_info = await self._extractor.extract(tx)
        if token_info is None:
            self.no_mint += 1
            logger.info(f"[PIPE] Could not extract token information from {event.signature[:16]}")
            return None

        logger.info(
            f"[PIPE] Token mint={token_info.mint} creator={token_info.creator or 'Unknown'}"
        )

        report = apply_score(await self._engine.run(token_info))
        token = MonitoredToken(
            signature=event.signature,
            token_info=token_info,
            safety_report=report,
            detected_at=datetime.now(UTC),
            platform=event.platform,
            slot=event.slot,
        )
        self._registry.upsert(token_info.mint, token)
        self.processed += 1

        if self.on_token:
            try:
                await self.on_token(token)
            except Exception as e:
                logger.error(f"[PIPE] on_token callback error: {e}")
        return token
