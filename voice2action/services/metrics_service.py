"""
Metrics Aggregator - resolve rate, response/resolution times and breakdowns.

The pure functions at the top take a list of issues and never touch storage;
MetricsService loads the relevant issues per request (no caching) and hands
them over. Empty inputs produce zero-valued results, never errors.
"""

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional
import logging

from voice2action.core.settings import settings
from voice2action.models.issue import Issue, IssueStatus
from voice2action.models.metrics import (
    CategoryCount,
    MetricsSummary,
    SeriesPoint,
    SeriesResult,
    WardStat,
)
from voice2action.services.storage import IssueRepository, get_issue_repository
from voice2action.utils.timestamps import day_key, hours_between, round_half_up, utc_now

logger = logging.getLogger(__name__)


def category_breakdown(issues: Iterable[Issue]) -> List[CategoryCount]:
    """Counts per category, largest first; ties broken by category name."""
    counts = Counter(issue.category for issue in issues)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [CategoryCount(category=category, count=count) for category, count in ordered]


def average_hours_since_creation(issues: Iterable[Issue], field: str) -> int:
    """
    Mean hours from created_at to ``field`` over issues where it is set.

    Negative durations (a timestamp earlier than created_at) are data-entry
    errors; they are clamped to 0 rather than dragging the average down.
    """
    durations = []
    for issue in issues:
        stamp = getattr(issue, field)
        if stamp is None:
            continue
        hours = hours_between(issue.created_at, stamp)
        if hours < 0:
            logger.warning(f"Issue {issue.id}: {field} precedes created_at by {-hours:.2f}h, clamping to 0")
            hours = 0.0
        durations.append(hours)

    if not durations:
        return 0
    return round_half_up(sum(durations) / len(durations))


def summarize(issues: Iterable[Issue]) -> MetricsSummary:
    issues = list(issues)
    total = len(issues)
    resolved = sum(1 for issue in issues if issue.status == IssueStatus.RESOLVED)

    return MetricsSummary(
        total=total,
        resolved=resolved,
        resolve_rate=round_half_up(100 * resolved / total) if total else 0,
        avg_first_response_hours=average_hours_since_creation(issues, "first_response_at"),
        avg_resolution_hours=average_hours_since_creation(issues, "resolved_at"),
        categories=category_breakdown(issues),
    )


def clamp_series_days(days: Optional[int]) -> int:
    """Default 30, capped at SERIES_MAX_DAYS, never negative."""
    if days is None:
        days = settings.SERIES_DEFAULT_DAYS
    return max(0, min(int(days), settings.SERIES_MAX_DAYS))


def window_start(days: int, now: datetime) -> datetime:
    return now - timedelta(days=days)


def daily_series(issues: Iterable[Issue], days: Optional[int], now: datetime) -> SeriesResult:
    """
    Daily counts (UTC) for issues created in the last ``days`` days.

    The series is sparse: days without issues are absent. Categories are
    counted over the same window.
    """
    days = clamp_series_days(days)
    if days == 0:
        return SeriesResult(days=0)

    since = window_start(days, now)
    in_window = [issue for issue in issues if issue.created_at >= since]

    per_day = Counter(day_key(issue.created_at) for issue in in_window)
    series = [SeriesPoint(day=day, count=count) for day, count in sorted(per_day.items())]

    return SeriesResult(days=days, series=series, categories=category_breakdown(in_window))


def ward_stats(issues: Iterable[Issue]) -> List[WardStat]:
    """Totals per non-empty ward code, sorted by ward code."""
    totals: Dict[str, int] = defaultdict(int)
    resolved: Dict[str, int] = defaultdict(int)

    for issue in issues:
        if not issue.ward_code:
            continue
        totals[issue.ward_code] += 1
        if issue.status == IssueStatus.RESOLVED:
            resolved[issue.ward_code] += 1

    return [
        WardStat(
            ward_code=code,
            total=totals[code],
            resolved=resolved[code],
            open=totals[code] - resolved[code],
        )
        for code in sorted(totals)
    ]


class MetricsService:
    """Loads issues from the repository and runs the aggregations above."""

    def __init__(
        self,
        repository: Optional[IssueRepository] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.repository = repository or get_issue_repository()
        self.clock = clock

    def _load(self, filters: Optional[Dict] = None, created_since: Optional[datetime] = None) -> List[Issue]:
        docs = self.repository.query(filters=filters, created_since=created_since)
        return [Issue.from_document(doc["id"], doc) for doc in docs]

    def metrics(self, org_code: Optional[str] = None) -> MetricsSummary:
        """Scorecard for the whole collection, or one organization."""
        return summarize(self._load(filters={"org_code": org_code} if org_code else None))

    def series(self, days: Optional[int] = None) -> SeriesResult:
        days = clamp_series_days(days)
        now = self.clock()
        if days == 0:
            return SeriesResult(days=0)
        issues = self._load(created_since=window_start(days, now))
        return daily_series(issues, days, now)

    def ward_stats(self) -> List[WardStat]:
        return ward_stats(self._load())


# Global service instance
_metrics_service = None


def get_metrics_service() -> MetricsService:
    """Get or create MetricsService singleton."""
    global _metrics_service
    if _metrics_service is None:
        _metrics_service = MetricsService()
    return _metrics_service
