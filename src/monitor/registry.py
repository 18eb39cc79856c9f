"""In-memory registry of scored tokens, keyed by mint.

Last write wins: a repeat detection replaces the previous entry and moves
it to the most-recent end. With a capacity set, the least recently
upserted mint is evicted first.
"""

from collections import OrderedDict
from threading import Lock

from loguru import logger

from src.monitor.models import MonitoredToken, RegistryEntry, RegistryStats


class TokenRegistry:
    def __init__(self, max_tokens: int = 0) -> None:
        self._max_tokens = max(0, max_tokens)
        self._tokens: OrderedDict[str, MonitoredToken] = OrderedDict()
        self._lock = Lock()
        self._evicted = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def __contains__(self, mint: object) -> bool:
        with self._lock:
            return mint in self._tokens

    @property
    def evicted_count(self) -> int:
        return self._evicted

    def get(self, mint: str) -> MonitoredToken | None:
        with self._lock:
            return self._tokens.get(mint)

    def upsert(self, mint: str, token: MonitoredToken) -> None:
        with self._lock:
            if mint in self._tokens:
                self._tokens.move_to_end(mint)
            self._tokens[mint] = token
            while self._max_tokens and len(self._tokens) > self._max_tokens:
                evicted_mint, _ = self._tokens.popitem(last=False)
                self._evicted += 1
                logger.debug(f"[REGISTRY] Evicted {evicted_mint[:12]} (capacity {self._max_tokens})")

    def stats(self) -> RegistryStats:
        with self._lock:
            tokens = list(self._tokens.items())
        entries = [
            RegistryEntry(
                mint=mint,
                score=token.safety_report.overall_score,
                recommendation=token.safety_report.recommendation,
                platform=token.platform,
                detected_at=token.detected_at,
            )
            for mint, token in tokens
        ]
        return RegistryStats(total_count=len(entries), entries=entries)
