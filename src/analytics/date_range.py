"""Resolution of caller-supplied date bounds."""

from typing import Optional
from datetime import datetime
import logging

from shared.exceptions import InvalidRangeError
from shared.validators import parse_timestamp
from analytics.models import DateRange

logger = logging.getLogger(__name__)


def resolve_date_range(
    raw_start: Optional[str] = None,
    raw_end: Optional[str] = None,
    now: Optional[datetime] = None
) -> DateRange:
    """
    Resolve optional startDate/endDate query values into a DateRange.

    A missing start defaults to January 1, 00:00 of the current year and a
    missing end defaults to the current instant (UTC). Inverted ranges are
    returned as-is; they select no records downstream.

    Args:
        raw_start: ISO-8601 start bound, or None
        raw_end: ISO-8601 end bound, or None
        now: Reference instant, defaults to datetime.utcnow()

    Returns:
        Resolved inclusive date range

    Raises:
        InvalidRangeError: If either bound is not a valid date
    """
    now = now or datetime.utcnow()

    try:
        start = parse_timestamp(raw_start) if raw_start else datetime(now.year, 1, 1)
        end = parse_timestamp(raw_end) if raw_end else now
    except ValueError as e:
        logger.warning(f"Rejected date range start={raw_start!r} end={raw_end!r}: {e}")
        raise InvalidRangeError()

    return DateRange(start=start, end=end)
