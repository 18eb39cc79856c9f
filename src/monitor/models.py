"""Data model for the launch → safety report pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel


class LaunchEvent(BaseModel):
    """A log notification classified as a pool launch."""

    signature: str
    slot: int
    platform: str
    logs: list[str] = []

    model_config = {"extra": "ignore", "frozen": True}


class TokenInfo(BaseModel):
    """Token identity extracted from a launch transaction."""

    mint: str
    pool: str | None = None
    creator: str | None = None

    model_config = {"extra": "ignore", "frozen": True}


class CheckStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    ERROR = "error"
    UNKNOWN = "unknown"


class Recommendation(str, Enum):
    SAFE = "SAFE"
    CAUTION = "CAUTION"
    RISKY = "RISKY"
    DANGER = "DANGER"

    @property
    def label(self) -> str:
        return _RECOMMENDATION_LABELS[self]


_RECOMMENDATION_LABELS: dict[Recommendation, str] = {
    Recommendation.SAFE: "SAFE - Good fundamentals",
    Recommendation.CAUTION: "CAUTION - Some risks present",
    Recommendation.RISKY: "RISKY - Multiple red flags",
    Recommendation.DANGER: "DANGER - High risk, likely scam",
}


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one safety dimension."""

    status: CheckStatus
    message: str
    detail: Any = None


def _not_run() -> CheckResult:
    return CheckResult(status=CheckStatus.UNKNOWN, message="Check did not run")


# Slot names in display order; also the keys of SCORE_WEIGHTS
CHECK_SLOTS: tuple[str, ...] = (
    "mint_authority",
    "freeze_authority",
    "metadata",
    "liquidity",
    "top_holders",
)


@dataclass
class SafetyReport:
    """Five check slots plus the aggregated score.

    Slots start as UNKNOWN placeholders so a report is never missing one,
    even if a check is cancelled before writing its result.
    """

    mint_authority: CheckResult = field(default_factory=_not_run)
    freeze_authority: CheckResult = field(default_factory=_not_run)
    metadata: CheckResult = field(default_factory=_not_run)
    liquidity: CheckResult = field(default_factory=_not_run)
    top_holders: CheckResult = field(default_factory=_not_run)
    overall_score: int = 0
    recommendation: Recommendation = Recommendation.DANGER

    def checks(self) -> dict[str, CheckResult]:
        return {slot: getattr(self, slot) for slot in CHECK_SLOTS}


@dataclass(frozen=True)
class MonitoredToken:
    """A scored token as held by the registry."""

    signature: str
    token_info: TokenInfo
    safety_report: SafetyReport
    detected_at: datetime
    platform: str
    slot: int = 0

    @property
    def mint(self) -> str:
        return self.token_info.mint


@dataclass(frozen=True)
class RegistryEntry:
    mint: str
    score: int
    recommendation: Recommendation
    platform: str
    detected_at: datetime


@dataclass(frozen=True)
class RegistryStats:
    """Point-in-time registry snapshot for periodic reporting."""

    total_count: int
    entries: list[RegistryEntry] = field(default_factory=list)

    @property
    def by_recommendation(self) -> dict[Recommendation, int]:
        counts = {rec: 0 for rec in Recommendation}
        for entry in self.entries:
            counts[entry.recommendation] += 1
        return counts
