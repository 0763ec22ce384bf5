"""Analytics aggregation domain service."""

from datetime import date, datetime, time, timedelta, tzinfo, UTC
from typing import Optional, TYPE_CHECKING

from dateutil import tz

from mealcard.domain.entities import AnalyticsSnapshot, RequestStatus, TransactionKind
from mealcard.domain.errors import ValidationError

if TYPE_CHECKING:
    from mealcard.database.base import Database


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def day_bounds(day: date, zone: tzinfo) -> tuple[datetime, datetime]:
    """Return the naive UTC instants bounding a calendar day in a zone."""
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return to_naive_utc(start), to_naive_utc(end)


class AnalyticsService:
    """Service for read-only rollups over the log and request workflow.

    Nothing is cached: every snapshot is recomputed from stored rows, so it
    can never drift from the ledger.
    """

    def __init__(self, db: "Database", timezone: Optional[tzinfo] = None):
        """Initialize analytics service.

        Args:
            db: Database instance
            timezone: Zone used to cut calendar days; defaults to local time
        """
        self.db = db
        self.timezone = timezone if timezone is not None else tz.tzlocal()

    def snapshot(self, start: datetime, end: datetime) -> AnalyticsSnapshot:
        """Build counters for transactions created in ``[start, end)``.

        Request status counts are current totals over all requests, since a
        pending request stays in the backlog until someone processes it.

        Raises:
            ValidationError: If end is before start
        """
        start = to_naive_utc(start)
        end = to_naive_utc(end)
        if end < start:
            raise ValidationError("Analytics window end must not be before its start")

        by_kind = {row["kind"]: row for row in self.db.get_transaction_summary(start, end)}
        recharges = by_kind.get(TransactionKind.RECHARGE.value, {})
        purchases = by_kind.get(TransactionKind.PURCHASE.value, {})
        revenue = sum(row["credit_total"] for row in by_kind.values())

        status_counts = self.db.count_recharge_requests_by_status()

        return AnalyticsSnapshot(
            start=start,
            end=end,
            total_recharges=recharges.get("count", 0),
            total_purchases=purchases.get("count", 0),
            total_revenue=revenue,
            pending_requests=status_counts.get(RequestStatus.PENDING.value, 0),
            approved_requests=status_counts.get(RequestStatus.APPROVED.value, 0),
            rejected_requests=status_counts.get(RequestStatus.REJECTED.value, 0),
        )

    def today(self) -> date:
        """Return the current calendar date in the configured zone."""
        return datetime.now(self.timezone).date()

    def daily_snapshot(self, day: Optional[date] = None) -> AnalyticsSnapshot:
        """Build the snapshot for one calendar day (default: today)."""
        if day is None:
            day = self.today()
        start, end = day_bounds(day, self.timezone)
        return self.snapshot(start, end)

    def period_snapshot(self, start_day: date, end_day: date) -> AnalyticsSnapshot:
        """Build one snapshot spanning calendar days start_day through end_day.

        Raises:
            ValidationError: If end_day is before start_day
        """
        if end_day < start_day:
            raise ValidationError("End date must not be before start date")
        start, _ = day_bounds(start_day, self.timezone)
        _, end = day_bounds(end_day, self.timezone)
        return self.snapshot(start, end)

    def daily_series(self, start_day: date, end_day: date) -> list[AnalyticsSnapshot]:
        """Build one snapshot per day from start_day through end_day inclusive.

        Raises:
            ValidationError: If end_day is before start_day
        """
        if end_day < start_day:
            raise ValidationError("End date must not be before start date")

        series = []
        day = start_day
        while day <= end_day:
            series.append(self.daily_snapshot(day))
            day += timedelta(days=1)
        return series
