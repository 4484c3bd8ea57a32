"""Lambda handler for analytics operations."""

import os
import logging
from typing import Dict, Any
import sys

# Add parent directory to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.response import success_response, error_response, validation_error_response, unauthorized_response
from shared.exceptions import SpendingAnalyticsException, InvalidRangeError
from shared.identity import get_user_id
from analytics.date_range import resolve_date_range
from analytics.service import AnalyticsService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize service
analytics_service = AnalyticsService()

# Path -> AnalyticsService method computing the view
ROUTES = {
    '/analytics/category-wise': 'get_category_wise_expenses',
    '/analytics/daily-totals': 'get_daily_totals',
    '/analytics/weekly-totals': 'get_weekly_totals',
    '/analytics/monthly-totals': 'get_monthly_totals',
    '/analytics/payment-source-distribution': 'get_payment_source_distribution',
    '/analytics/expense-trends': 'get_expense_trends',
    '/analytics/summary': 'get_summary',
    '/analytics/overview': 'get_overview',
}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for analytics operations.

    Handles (all GET, all accepting optional startDate/endDate):
    - /analytics/category-wise - Total per category
    - /analytics/daily-totals - Total per day
    - /analytics/weekly-totals - Total per Sunday-anchored week
    - /analytics/monthly-totals - Total per month name
    - /analytics/payment-source-distribution - Expense count per payment source
    - /analytics/expense-trends - Chronological (date, amount) series
    - /analytics/summary - Composite summary
    - /analytics/overview - All of the above from one snapshot

    Args:
        event: Lambda event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        # Log request
        logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

        # Get user ID from Cognito authorizer
        user_id = get_user_id(event)
        if not user_id:
            return unauthorized_response()

        # Get HTTP method and path
        http_method = event.get('httpMethod')
        path = event.get('path')

        # Route request
        view = ROUTES.get(path)
        if view is None or http_method != 'GET':
            return error_response("Route not found", status_code=404)

        return handle_view(event, user_id, view)

    except SpendingAnalyticsException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_view(event: Dict[str, Any], user_id: str, view: str) -> Dict[str, Any]:
    """
    Handle a single analytics view request.

    The date range is resolved before the store is touched, so a malformed
    bound never costs a query. Store failures propagate to lambda_handler.

    Args:
        event: Lambda event
        user_id: User ID
        view: Name of the AnalyticsService method to call

    Returns:
        API Gateway response with data and the resolved range as metadata
    """
    query_params = event.get('queryStringParameters') or {}

    try:
        date_range = resolve_date_range(query_params.get('startDate'), query_params.get('endDate'))
    except InvalidRangeError as e:
        return validation_error_response(e.message)

    logger.info(f"Computing {view} for user {user_id} from {date_range.start} to {date_range.end}")

    data = getattr(analytics_service, view)(user_id, date_range)

    return success_response(data=data, metadata=date_range.to_metadata())
