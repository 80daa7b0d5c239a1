from datetime import date, datetime, timedelta, timezone
import functools
import logging

from sqlalchemy.exc import SQLAlchemyError

from app.response import DataUnavailableError

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def start_of_month(today: date | None = None) -> datetime:
    """First instant of the current UTC calendar month."""
    today = today or utc_today()
    return datetime(today.year, today.month, 1, tzinfo=timezone.utc)


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def last_months(count: int, today: date | None = None) -> list[tuple[int, int]]:
    """(year, month) pairs for the last ``count`` months, oldest first, ending with the current one."""
    today = today or utc_today()
    return [
        shift_month(today.year, today.month, -offset)
        for offset in range(count - 1, -1, -1)
    ]


def ending_soon_window(days: int, today: date | None = None) -> tuple[date, date]:
    today = today or utc_today()
    return today, today + timedelta(days=days)


def report_query(func):
    """Surface store failures in read-only aggregations as 503 instead of zeros."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError:
            logger.exception("Report query %s failed", func.__name__)
            raise DataUnavailableError()

    return wrapper
