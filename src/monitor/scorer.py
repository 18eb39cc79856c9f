"""Weighted safety score (0-100) and recommendation tier.

Pure functions over the five report slots: no clock, no I/O, and the
result does not depend on the order in which checks finished.
"""

from decimal import ROUND_HALF_UP, Decimal

from src.monitor.models import CheckStatus, Recommendation, SafetyReport

SCORE_WEIGHTS: dict[str, int] = {
    "mint_authority": 30,
    "freeze_authority": 30,
    "metadata": 10,
    "liquidity": 15,
    "top_holders": 15,
}

STATUS_CREDIT: dict[CheckStatus, Decimal] = {
    CheckStatus.PASS: Decimal("1"),
    CheckStatus.WARNING: Decimal("0.5"),
    CheckStatus.UNKNOWN: Decimal("0.5"),
    CheckStatus.FAIL: Decimal("0"),
    CheckStatus.ERROR: Decimal("0"),
}

# Inclusive lower bounds, highest first
RECOMMENDATION_THRESHOLDS: list[tuple[int, Recommendation]] = [
    (80, Recommendation.SAFE),
    (60, Recommendation.CAUTION),
    (40, Recommendation.RISKY),
]


def compute_score(report: SafetyReport) -> int:
    total = Decimal(0)
    for slot, weight in SCORE_WEIGHTS.items():
        status = getattr(report, slot).status
        total += weight * STATUS_CREDIT[status]
    # Half-up (92.5 → 93); built-in round() would give 92
    score = int(total.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return max(0, min(100, score))


def recommendation_for(score: int) -> Recommendation:
    for threshold, recommendation in RECOMMENDATION_THRESHOLDS:
        if score >= threshold:
            return recommendation
    return Recommendation.DANGER


def score_report(report: SafetyReport) -> tuple[int, Recommendation]:
    score = compute_score(report)
    return score, recommendation_for(score)


def apply_score(report: SafetyReport) -> SafetyReport:
    """Fill overall_score and recommendation in place and return the report."""
    report.overall_score, report.recommendation = score_report(report)
    return report
