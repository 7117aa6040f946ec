import os
import logging
from datetime import datetime, date, timedelta, timezone, tzinfo
from typing import Optional

from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Santiago"


def get_app_timezone() -> tzinfo:
    tz_name = (
        os.getenv("APP_TIMEZONE")
        or os.getenv("TIMEZONE")
        or os.getenv("TZ")
        or DEFAULT_TIMEZONE
    )
    try:
        return ZoneInfo(tz_name)
    except Exception:
        logger.warning(f"Unknown timezone '{tz_name}', falling back to UTC-3")
    return timezone(timedelta(hours=-3))


def now_utc_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_local(tz: Optional[tzinfo] = None) -> date:
    tz = tz or get_app_timezone()
    return datetime.now(timezone.utc).astimezone(tz).date()


def as_utc_naive(dt: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; aware values are converted first."""
    if dt is None:
        return None
    if getattr(dt, "tzinfo", None) is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def local_date(dt: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of ``dt`` in the app time zone (naive values are UTC)."""
    tz = tz or get_app_timezone()
    if getattr(dt, "tzinfo", None) is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz).date()


def env_flag(name: str, default: str = "false") -> bool:
    return str(os.getenv(name, default)).strip().lower() in ("1", "true", "yes", "on")
