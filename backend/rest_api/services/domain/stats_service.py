"""
Sales Stats Domain Service.

Sums order totals over calendar days (UTC): today, the last 7 days, the
last 30 days, plus one point per day with sales inside the 30 day window.
Every order counts, paid or not.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from rest_api.models import Order
from shared.config.constants import Limits
from shared.utils.money import to_money
from shared.utils.schemas import SalesPoint, SalesStats


def _as_utc_date(value: datetime) -> date:
    # SQLite hands timestamps back naive; they are stored in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).date()


class StatsService:
    """Domain service for the back office sales dashboard."""

    def __init__(self, db: Session):
        self._db = db

    def get_sales_stats(self, now: datetime | None = None) -> SalesStats:
        now = now or datetime.now(timezone.utc)
        today = _as_utc_date(now)
        month_start = today - timedelta(days=Limits.MONTHLY_WINDOW_DAYS)
        week_start = today - timedelta(days=Limits.WEEKLY_WINDOW_DAYS)

        window_start = datetime(month_start.year, month_start.month, month_start.day, tzinfo=timezone.utc)
        rows = self._db.execute(
            select(Order.created_at, Order.total_price).where(Order.created_at >= window_start)
        ).all()

        by_day: dict[date, Decimal] = defaultdict(Decimal)
        for created_at, total in rows:
            day = _as_utc_date(created_at)
            if month_start <= day <= today:
                by_day[day] += total

        def window_sum(start: date) -> Decimal:
            return to_money(sum((v for d, v in by_day.items() if d >= start), Decimal("0")))

        return SalesStats(
            daily=to_money(by_day.get(today, Decimal("0"))),
            weekly=window_sum(week_start),
            monthly=window_sum(month_start),
            sales_over_time=[
                SalesPoint(date=day.isoformat(), total=to_money(by_day[day]))
                for day in sorted(by_day)
            ],
        )
