"""
Aggregation engine for spending analytics.

Every function here is a pure reduction over an already-filtered snapshot of
expense records. None of them raise on an empty snapshot: list views come
back empty and the summary comes back zeroed with ``N/A`` labels.

Grouping keys (category, payment source) are free-text strings kept in
insertion-ordered dicts. Totals are rounded to two decimal places.
"""

from typing import Any, Dict, Iterable, List, Sequence, Tuple
from datetime import datetime, timedelta
from collections import defaultdict

from analytics.models import (
    DAY,
    WEEK,
    MONTH,
    GRANULARITIES,
    NOT_AVAILABLE,
    UNKNOWN_PAYMENT_SOURCE,
    BucketTotal,
    CategoryTotal,
    ExpenseRecord,
    PaymentSourceCount,
    Summary,
    TrendPoint,
)


MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)


def _day_label(moment: datetime) -> str:
    return moment.date().isoformat()


def _week_label(moment: datetime) -> str:
    # Weeks run Sunday..Saturday; isoweekday() is Monday=1..Sunday=7
    week_start = moment.date() - timedelta(days=moment.isoweekday() % 7)
    week_end = week_start + timedelta(days=6)
    return f"{week_start.isoformat()} to {week_end.isoformat()}"


def _month_label(moment: datetime) -> str:
    # No year: the same month of different years shares one bucket
    return MONTH_NAMES[moment.month - 1]


_BUCKET_LABELS = {
    DAY: _day_label,
    WEEK: _week_label,
    MONTH: _month_label,
}


def _chronological(records: Iterable[ExpenseRecord]) -> List[ExpenseRecord]:
    # sorted() is stable, so same-instant records keep store order
    return sorted(records or [], key=lambda record: record.date)


def _top_label(pairs: Iterable[Tuple[str, float]]) -> str:
    """Label with the highest value; equal values go to the smallest label."""
    ranked = sorted(pairs, key=lambda pair: (-pair[1], pair[0]))
    return ranked[0][0] if ranked else NOT_AVAILABLE


def payment_source_of(record: ExpenseRecord) -> str:
    return record.payment_source or UNKNOWN_PAYMENT_SOURCE


def category_totals(records: Sequence[ExpenseRecord]) -> List[CategoryTotal]:
    """Total amount per exact category label, ascending by label."""
    totals = defaultdict(float)

    for record in records or []:
        totals[record.category] += record.amount

    return [
        CategoryTotal(category=category, total_amount=round(amount, 2))
        for category, amount in sorted(totals.items())
    ]


def bucket_totals(records: Sequence[ExpenseRecord], granularity: str) -> List[BucketTotal]:
    """
    Total amount per time bucket.

    Day and week buckets come back in calendar order. Month buckets are keyed
    by month name alone and come back in order of each name's first
    chronological appearance, so January 2024 records land in the bucket
    opened by January 2023 when both years are in range.

    Args:
        records: Filtered expense records
        granularity: One of ``day``, ``week`` or ``month``

    Returns:
        Bucket totals

    Raises:
        ValueError: If granularity is not supported
    """
    if granularity not in _BUCKET_LABELS:
        raise ValueError(
            f"Unsupported granularity {granularity!r}. Must be one of: {', '.join(GRANULARITIES)}"
        )

    label_for = _BUCKET_LABELS[granularity]
    totals: Dict[str, float] = {}

    # Day and week labels start with an ISO date, so walking records in
    # chronological order also yields calendar order for them.
    for record in _chronological(records):
        label = label_for(record.date)
        totals[label] = totals.get(label, 0.0) + record.amount

    return [
        BucketTotal(bucket_label=label, total_amount=round(amount, 2))
        for label, amount in totals.items()
    ]


def payment_source_distribution(records: Sequence[ExpenseRecord]) -> List[PaymentSourceCount]:
    """Number of records per payment source, ascending by source label."""
    counts = defaultdict(int)

    for record in records or []:
        counts[payment_source_of(record)] += 1

    return [
        PaymentSourceCount(payment_source=source, count=count)
        for source, count in sorted(counts.items())
    ]


def trend_series(records: Sequence[ExpenseRecord]) -> List[TrendPoint]:
    """One (day, amount) point per record in chronological order."""
    return [
        TrendPoint(date=_day_label(record.date), amount=record.amount)
        for record in _chronological(records)
    ]


def summary(records: Sequence[ExpenseRecord]) -> Summary:
    """
    Composite summary of a snapshot.

    The most spent category and the most used payment source are picked by
    highest total and highest count respectively. Exact ties resolve to the
    lexicographically smallest label.
    """
    records = list(records or [])
    categories = category_totals(records)
    sources = payment_source_distribution(records)

    return Summary(
        total_amount=round(sum(record.amount for record in records), 2),
        total_categories=len(categories),
        most_spent_category=_top_label((c.category, c.total_amount) for c in categories),
        most_used_payment_source=_top_label((s.payment_source, s.count) for s in sources),
    )


def all_views(records: Sequence[ExpenseRecord]) -> Dict[str, Any]:
    """All seven views of one snapshot, serialized for the response body."""
    records = list(records or [])

    return {
        'categoryWise': [item.to_dict() for item in category_totals(records)],
        'dailyTotals': [item.to_dict(DAY) for item in bucket_totals(records, DAY)],
        'weeklyTotals': [item.to_dict(WEEK) for item in bucket_totals(records, WEEK)],
        'monthlyTotals': [item.to_dict(MONTH) for item in bucket_totals(records, MONTH)],
        'paymentSourceDistribution': [item.to_dict() for item in payment_source_distribution(records)],
        'expenseTrends': [item.to_dict() for item in trend_series(records)],
        'summary': summary(records).to_dict(),
    }
