"""Plain-text renderings of reports and stats for the console log."""

from datetime import UTC, datetime

from src.monitor.models import (
    CHECK_SLOTS,
    CheckStatus,
    MonitoredToken,
    Recommendation,
    RegistryStats,
)

RULE = "=" * 80
THIN_RULE = "─" * 80

_STATUS_ICONS: dict[CheckStatus, str] = {
    CheckStatus.PASS: "✅",
    CheckStatus.FAIL: "⚠️ ",
    CheckStatus.WARNING: "⚠️ ",
    CheckStatus.UNKNOWN: "❔",
    CheckStatus.ERROR: "❌",
}

_RECOMMENDATION_ICONS: dict[Recommendation, str] = {
    Recommendation.SAFE: "🟢",
    Recommendation.CAUTION: "🟡",
    Recommendation.RISKY: "🟠",
    Recommendation.DANGER: "🔴",
}

_SLOT_TITLES: dict[str, str] = {
    "mint_authority": "Mint Authority",
    "freeze_authority": "Freeze Authority",
    "metadata": "Metadata",
    "liquidity": "Liquidity",
    "top_holders": "Top Holders",
}


def format_recommendation(recommendation: Recommendation) -> str:
    return f"{_RECOMMENDATION_ICONS[recommendation]} {recommendation.label}"


def format_token_report(token: MonitoredToken) -> str:
    """Launch banner, token identity, per-check lines, score and verdict."""
    report = token.safety_report
    info = token.token_info
    lines = [
        RULE,
        f"🆕 NEW LAUNCH DETECTED on {token.platform}",
        f"Signature: {token.signature}",
        f"Slot: {token.slot}",
        RULE,
        "📋 Token Information:",
        f"   Mint: {info.mint}",
        f"   Pool: {info.pool or 'Unknown'}",
        f"   Creator: {info.creator or 'Unknown'}",
        "",
        "📊 SAFETY CHECK RESULTS:",
        THIN_RULE,
    ]
    for idx, slot in enumerate(CHECK_SLOTS, start=1):
        result = getattr(report, slot)
        title = f"{idx}. {_SLOT_TITLES[slot]}:"
        lines.append(f"{title:<22}{_STATUS_ICONS[result.status]} {result.message}")
    lines += [
        THIN_RULE,
        f"🎯 Overall Score: {report.overall_score}/100",
        f"📌 Recommendation: {format_recommendation(report.recommendation)}",
        RULE,
    ]
    return "\n".join(lines)


def format_stats(
    stats: RegistryStats, *, now: datetime | None = None, max_entries: int = 20
) -> str:
    """Periodic monitoring summary: totals, tier breakdown, per-token lines.

    Only the ``max_entries`` most recently detected tokens get a line.
    """
    now = now or datetime.now(UTC)
    lines = [
        "📈 MONITORING STATISTICS:",
        f"Total tokens detected: {stats.total_count}",
    ]
    if stats.total_count == 0:
        return "\n".join(lines)

    breakdown = ", ".join(
        f"{rec.value}={count}" for rec, count in stats.by_recommendation.items()
    )
    lines.append(f"By recommendation: {breakdown}")
    shown = stats.entries[-max_entries:] if max_entries > 0 else []
    hidden = len(stats.entries) - len(shown)
    if hidden:
        lines.append(f"  ... {hidden} earlier tokens not listed")
    for entry in shown:
        age_min = max(0, int((now - entry.detected_at).total_seconds() // 60))
        lines.append(
            f"  {entry.mint} | {entry.score:>3}/100 "
            f"{_RECOMMENDATION_ICONS[entry.recommendation]} {entry.recommendation.value} "
            f"| {entry.platform} | {age_min}m ago"
        )
    return "\n".join(lines)
