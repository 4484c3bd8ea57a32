"""Selection of the expense records an analytics request is computed over."""

from typing import Any, Dict, Iterable, List
import logging

from analytics.models import DateRange, ExpenseRecord

logger = logging.getLogger(__name__)


def filter_records(records: Iterable[ExpenseRecord], user_id: str, date_range: DateRange) -> List[ExpenseRecord]:
    """Keep records owned by user_id, not soft-deleted, dated inside the range."""
    return [
        record for record in records
        if record.user_id == user_id
        and not record.is_deleted
        and date_range.contains(record.date)
    ]


class RecordSelector:
    """Reads one snapshot of a user's records from the expense store."""

    def __init__(self, store: Any):
        """
        Initialize record selector.

        Args:
            store: Expense store exposing fetch_records(user_id, start, end)
        """
        self.store = store

    def select(self, user_id: str, date_range: DateRange) -> List[ExpenseRecord]:
        """
        Fetch and filter the records for a request.

        The store is queried exactly once. Its rows are filtered again here,
        so views only ever see the user's live records inside the range.

        Raises:
            UpstreamStoreError: If the store cannot be read
        """
        items: List[Dict[str, Any]] = self.store.fetch_records(user_id, date_range.start, date_range.end)
        records = filter_records((ExpenseRecord.model_validate(item) for item in items), user_id, date_range)

        if len(records) != len(items):
            logger.debug(f"Dropped {len(items) - len(records)} out-of-range or deleted rows for user {user_id}")

        logger.info(f"Selected {len(records)} expenses for user {user_id}")
        return records
