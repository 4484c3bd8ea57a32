"""Expense service: the DynamoDB-backed expense store."""

import os
import uuid
from typing import Dict, Any, List, Optional
from datetime import datetime
import logging
from boto3.dynamodb.conditions import Key, Attr

from shared.dynamodb import DynamoDBClient
from shared.validators import (
    format_timestamp,
    sanitize_string,
    validate_amount,
    validate_date,
    validate_label,
    validate_required_fields
)
from shared.exceptions import ValidationError, NotFoundError

logger = logging.getLogger(__name__)

DATE_INDEX = 'user-date-index'
MUTABLE_FIELDS = ('title', 'amount', 'date', 'category', 'payment_source')


def _not_deleted() -> Any:
    return Attr('is_deleted').not_exists() | Attr('is_deleted').eq(False)


class ExpenseService:
    """Service for storing and retrieving expenses."""

    def __init__(self, table_name: Optional[str] = None):
        """
        Initialize expense service.

        Args:
            table_name: DynamoDB table name, defaults to $EXPENSES_TABLE
        """
        self.expenses_table = DynamoDBClient(table_name or os.environ.get('EXPENSES_TABLE'))

    def fetch_records(self, user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """
        Fetch a user's live expenses dated inside [start, end].

        Reads every page of the user-date-index in ascending date order and
        leaves out soft-deleted rows. An inverted range returns no rows
        without querying, since DynamoDB rejects a BETWEEN whose bounds are
        out of order.

        Args:
            user_id: User ID
            start: Inclusive lower bound (naive UTC)
            end: Inclusive upper bound (naive UTC)

        Returns:
            Raw expense items

        Raises:
            UpstreamStoreError: If the query fails
        """
        if start > end:
            logger.info(f"Inverted range {start} > {end} for user {user_id}, nothing to fetch")
            return []

        key_condition = Key('user_id').eq(user_id) & Key('date').between(
            format_timestamp(start),
            format_timestamp(end)
        )

        items = self.expenses_table.query_all(
            key_condition,
            filter_expression=_not_deleted(),
            index_name=DATE_INDEX
        )

        logger.info(f"Fetched {len(items)} expenses for user {user_id}")
        return items

    def list_expenses(self, user_id: str) -> List[Dict[str, Any]]:
        """
        List all live expenses for a user, most recent first.

        Args:
            user_id: User ID

        Returns:
            Expense items
        """
        return self.expenses_table.query_all(
            Key('user_id').eq(user_id),
            filter_expression=_not_deleted(),
            index_name=DATE_INDEX,
            scan_forward=False
        )

    def get_expense(self, user_id: str, expense_id: str) -> Dict[str, Any]:
        """
        Get expense by ID.

        Args:
            user_id: User ID
            expense_id: Expense ID

        Returns:
            Expense data

        Raises:
            NotFoundError: If expense not found or soft-deleted
        """
        expense = self.expenses_table.get_item({
            'user_id': user_id,
            'expense_id': expense_id
        })

        if not expense or expense.get('is_deleted'):
            raise NotFoundError("Expense not found")

        return expense

    def create_expense(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create an expense.

        Args:
            user_id: User ID
            data: title, amount, date, category and optional payment_source

        Returns:
            Created expense

        Raises:
            ValidationError: If validation fails
        """
        validate_required_fields(data, ['title', 'amount', 'date', 'category'])

        now = datetime.utcnow().isoformat()
        expense = {
            'user_id': user_id,
            'expense_id': uuid.uuid4().hex,
            'title': validate_label(data['title'], 'Title', max_length=200),
            'amount': validate_amount(data['amount']),
            'date': validate_date(data['date']),
            'category': validate_label(data['category'], 'Category'),
            'payment_source': self._payment_source(data.get('payment_source')),
            'is_deleted': False,
            'created_at': now,
            'updated_at': now
        }

        created = self.expenses_table.put_item(expense)

        logger.info(f"Created expense {expense['expense_id']} for user {user_id}")
        return created

    def update_expense(
        self,
        user_id: str,
        expense_id: str,
        updates: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Update expense.

        Args:
            user_id: User ID
            expense_id: Expense ID
            updates: Fields to update

        Returns:
            Updated expense

        Raises:
            NotFoundError: If expense not found
            ValidationError: If validation fails
        """
        unknown = sorted(set(updates) - set(MUTABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

        if not updates:
            raise ValidationError("No updates provided")

        # Verify expense exists
        self.get_expense(user_id, expense_id)

        # Validate updates
        updates = dict(updates)

        if 'title' in updates:
            updates['title'] = validate_label(updates['title'], 'Title', max_length=200)

        if 'amount' in updates:
            updates['amount'] = validate_amount(updates['amount'])

        if 'date' in updates:
            updates['date'] = validate_date(updates['date'])

        if 'category' in updates:
            updates['category'] = validate_label(updates['category'], 'Category')

        if 'payment_source' in updates:
            updates['payment_source'] = self._payment_source(updates['payment_source'])

        updates['updated_at'] = datetime.utcnow().isoformat()

        updated_expense = self._set_fields(user_id, expense_id, updates)

        logger.info(f"Updated expense {expense_id}")
        return updated_expense

    def delete_expense(self, user_id: str, expense_id: str) -> None:
        """
        Soft-delete expense.

        The item stays in the table flagged is_deleted and drops out of
        listings and analytics.

        Args:
            user_id: User ID
            expense_id: Expense ID

        Raises:
            NotFoundError: If expense not found
        """
        # Verify expense exists
        self.get_expense(user_id, expense_id)

        self._set_fields(user_id, expense_id, {
            'is_deleted': True,
            'updated_at': datetime.utcnow().isoformat()
        })

        logger.info(f"Deleted expense {expense_id}")

    def _set_fields(self, user_id: str, expense_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Build and run a SET update expression over the given fields."""
        update_parts = []
        expr_values = {}
        expr_names = {}

        for key, value in fields.items():
            update_parts.append(f"#{key} = :{key}")
            expr_names[f'#{key}'] = key
            expr_values[f':{key}'] = value

        return self.expenses_table.update_item(
            key={'user_id': user_id, 'expense_id': expense_id},
            update_expression="SET " + ", ".join(update_parts),
            expression_values=expr_values,
            expression_names=expr_names
        )

    @staticmethod
    def _payment_source(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return sanitize_string(value, max_length=100) or None
