"""Analytics service for spending reports over a date range."""

from typing import Any, Dict, List, Optional
import logging

from analytics import engine
from analytics.models import DAY, WEEK, MONTH, DateRange
from analytics.selector import RecordSelector
from expenses.service import ExpenseService

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Service computing analytics views from one store read per request."""

    def __init__(self, store: Optional[Any] = None):
        """
        Initialize analytics service.

        Args:
            store: Expense store; defaults to the DynamoDB-backed ExpenseService
        """
        self.selector = RecordSelector(store if store is not None else ExpenseService())

    def get_category_wise_expenses(self, user_id: str, date_range: DateRange) -> List[Dict[str, Any]]:
        """Total spent per category."""
        records = self.selector.select(user_id, date_range)
        return [item.to_dict() for item in engine.category_totals(records)]

    def get_daily_totals(self, user_id: str, date_range: DateRange) -> List[Dict[str, Any]]:
        """Total spent per calendar day."""
        return self._bucket_totals(user_id, date_range, DAY)

    def get_weekly_totals(self, user_id: str, date_range: DateRange) -> List[Dict[str, Any]]:
        """Total spent per Sunday-to-Saturday week."""
        return self._bucket_totals(user_id, date_range, WEEK)

    def get_monthly_totals(self, user_id: str, date_range: DateRange) -> List[Dict[str, Any]]:
        """Total spent per month name."""
        return self._bucket_totals(user_id, date_range, MONTH)

    def get_payment_source_distribution(self, user_id: str, date_range: DateRange) -> List[Dict[str, Any]]:
        """Number of expenses per payment source."""
        records = self.selector.select(user_id, date_range)
        return [item.to_dict() for item in engine.payment_source_distribution(records)]

    def get_expense_trends(self, user_id: str, date_range: DateRange) -> List[Dict[str, Any]]:
        """Chronological (date, amount) series, one point per expense."""
        records = self.selector.select(user_id, date_range)
        return [item.to_dict() for item in engine.trend_series(records)]

    def get_summary(self, user_id: str, date_range: DateRange) -> Dict[str, Any]:
        """Total spent, category count, top category and top payment source."""
        records = self.selector.select(user_id, date_range)
        return engine.summary(records).to_dict()

    def get_overview(self, user_id: str, date_range: DateRange) -> Dict[str, Any]:
        """Every view, derived from a single snapshot of the store."""
        records = self.selector.select(user_id, date_range)
        logger.info(f"Building analytics overview from {len(records)} expenses for user {user_id}")
        return engine.all_views(records)

    def _bucket_totals(self, user_id: str, date_range: DateRange, granularity: str) -> List[Dict[str, Any]]:
        records = self.selector.select(user_id, date_range)
        return [item.to_dict(granularity) for item in engine.bucket_totals(records, granularity)]
