"""Launch classifiers decide whether a log notification is a pool launch."""

from collections.abc import Iterable, Sequence
from typing import Protocol

DEFAULT_LAUNCH_KEYWORDS = ("initialize", "init", "create")


class LaunchClassifier(Protocol):
    def is_launch(self, logs: Sequence[str]) -> bool: ...


class KeywordClassifier:
    """Substring match on the lower-cased, space-joined log lines.

    Deliberately noisy: "init" also matches "InitializeAccount" and similar
    non-launch instructions. False positives are dropped later when no mint
    is found in the transaction.
    """

    def __init__(self, keywords: Iterable[str] = DEFAULT_LAUNCH_KEYWORDS) -> None:
        self._keywords = tuple(k.lower() for k in keywords if k)

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

    def is_launch(self, logs: Sequence[str]) -> bool:
        if not logs or not self._keywords:
            return False
        text = " ".join(logs).lower()
        return any(keyword in text for keyword in self._keywords)
