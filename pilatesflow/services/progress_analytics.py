"""
Progress analytics

Plain functions over completion records. Nothing here is stored: totals,
practice minutes, streaks and month buckets are recomputed from the record set
every time they are asked for. Calendar days are taken in the application time
zone (see ``pilatesflow.utils.get_app_timezone``).
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from pilatesflow.models.schemas import (
    ClassRecord,
    MonthBucket,
    ProgressRecord,
    ProgressSummary,
)
from pilatesflow.utils import get_app_timezone, local_date, today_local

DEFAULT_CLASS_MINUTES = 30
MAX_STREAK_LOOKBACK_DAYS = 365


def durations_by_class(classes: Iterable[ClassRecord]) -> Dict[str, Optional[int]]:
    return {c.id: c.duration_minutes for c in classes}


def total_completed(items: Sequence[ProgressRecord]) -> int:
    return len(items)


def estimated_minutes(
    items: Iterable[ProgressRecord],
    durations: Mapping[str, Optional[int]],
    default: int = DEFAULT_CLASS_MINUTES,
) -> int:
    """Sum of class durations; unknown durations and missing classes count ``default``."""
    total = 0
    for item in items:
        minutes = durations.get(item.class_id)
        total += minutes if minutes else default
    return total


def last_completed_at(items: Iterable[ProgressRecord]) -> Optional[datetime]:
    stamps = [i.completed_at for i in items if i.completed_at is not None]
    return max(stamps) if stamps else None


def completion_days(items: Iterable[ProgressRecord], tz: Optional[tzinfo] = None) -> set:
    tz = tz or get_app_timezone()
    return {local_date(i.completed_at, tz) for i in items if i.completed_at is not None}


def current_streak(
    items: Iterable[ProgressRecord],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    max_lookback_days: int = MAX_STREAK_LOOKBACK_DAYS,
) -> int:
    """Consecutive days with a completion, counting back from ``today``.

    A day without completions ends the streak, so nothing done today means 0.
    """
    tz = tz or get_app_timezone()
    today = today or today_local(tz)
    days = completion_days(items, tz)
    streak = 0
    for offset in range(max_lookback_days):
        if (today - timedelta(days=offset)) not in days:
            break
        streak += 1
    return streak


def month_key(dt: datetime, tz: Optional[tzinfo] = None) -> str:
    d = local_date(dt, tz)
    return f"{d.year:04d}-{d.month:02d}"


def filter_month(
    items: Iterable[ProgressRecord], month: str, tz: Optional[tzinfo] = None
) -> List[ProgressRecord]:
    tz = tz or get_app_timezone()
    return [
        i for i in items
        if i.completed_at is not None and month_key(i.completed_at, tz) == month
    ]


def group_by_month(
    items: Iterable[ProgressRecord],
    durations: Mapping[str, Optional[int]],
    tz: Optional[tzinfo] = None,
) -> List[MonthBucket]:
    """One bucket per ``YYYY-MM`` with count and minutes, most recent month first."""
    tz = tz or get_app_timezone()
    grouped: Dict[str, List[ProgressRecord]] = {}
    for item in items:
        if item.completed_at is None:
            continue
        grouped.setdefault(month_key(item.completed_at, tz), []).append(item)

    return [
        MonthBucket(
            month=key,
            count=len(grouped[key]),
            minutes=estimated_minutes(grouped[key], durations),
        )
        for key in sorted(grouped, reverse=True)
    ]


def build_summary(
    items: Sequence[ProgressRecord],
    classes: Iterable[ClassRecord],
    today: Optional[date] = None,
    month: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> ProgressSummary:
    tz = tz or get_app_timezone()
    durations = durations_by_class(classes)
    scoped = filter_month(items, month, tz) if month else list(items)
    return ProgressSummary(
        total_completed=total_completed(scoped),
        estimated_minutes=estimated_minutes(scoped, durations),
        last_completed_at=last_completed_at(scoped),
        current_streak=current_streak(items, today=today, tz=tz),
        months=group_by_month(scoped, durations, tz),
    )
