"""Analytics data models."""

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.validators import parse_timestamp

# Bucket granularities understood by the aggregation engine
DAY = 'day'
WEEK = 'week'
MONTH = 'month'
GRANULARITIES = (DAY, WEEK, MONTH)

UNKNOWN_PAYMENT_SOURCE = 'Unknown'
NOT_AVAILABLE = 'N/A'


class ExpenseRecord(BaseModel):
    """Expense record as read from the expense store."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    expense_id: str
    user_id: str
    title: str = ''
    amount: float
    date: datetime
    category: str
    payment_source: Optional[str] = None
    is_deleted: bool = False

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, value: Any) -> datetime:
        return parse_timestamp(value)


class DateRange(BaseModel):
    """Inclusive [start, end] interval; start may come after end."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def to_metadata(self) -> Dict[str, str]:
        """Metadata block echoed back to the caller; bounds are UTC."""
        return {
            'startDate': f"{self.start.isoformat()}Z",
            'endDate': f"{self.end.isoformat()}Z"
        }


class _View(BaseModel):
    """Base for analytics views; serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class CategoryTotal(_View):
    category: str
    total_amount: float = Field(alias='totalAmount')


class BucketTotal(_View):
    bucket_label: str = Field(alias='bucketLabel')
    total_amount: float = Field(alias='totalAmount')

    def to_dict(self, granularity: Optional[str] = None) -> Dict[str, Any]:
        """
        Serialize the bucket.

        With a granularity, the label is keyed by it (``day``, ``week`` or
        ``month``), the shape the totals endpoints return.
        """
        if granularity is None:
            return super().to_dict()
        return {granularity: self.bucket_label, 'totalAmount': self.total_amount}


class PaymentSourceCount(_View):
    payment_source: str = Field(alias='paymentSource')
    count: int


class TrendPoint(_View):
    date: str
    amount: float


class Summary(_View):
    total_amount: float = Field(alias='totalAmount')
    total_categories: int = Field(alias='totalCategories')
    most_spent_category: str = Field(alias='mostSpentCategory')
    most_used_payment_source: str = Field(alias='mostUsedPaymentSource')
