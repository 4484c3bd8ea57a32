"""Lambda handler for expense operations."""

import json
import os
import logging
from typing import Dict, Any
import sys

import pydantic

# Add parent directory to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.response import success_response, error_response, validation_error_response, unauthorized_response
from shared.exceptions import SpendingAnalyticsException
from shared.identity import get_user_id
from expenses.models import ExpenseCreate, ExpenseUpdate
from expenses.service import ExpenseService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize service
expense_service = ExpenseService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for expense operations.

    Handles:
    - GET /expenses - List expenses
    - POST /expenses - Create expense
    - GET /expenses/{id} - Get expense details
    - PUT /expenses/{id} - Update expense
    - DELETE /expenses/{id} - Soft-delete expense

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
        path = event.get('path') or ''

        # Route request
        if path == '/expenses' and http_method == 'GET':
            return handle_list(event, user_id)
        elif path == '/expenses' and http_method == 'POST':
            return handle_create(event, user_id)
        elif path.startswith('/expenses/') and http_method == 'GET':
            return handle_get(event, user_id)
        elif path.startswith('/expenses/') and http_method == 'PUT':
            return handle_update(event, user_id)
        elif path.startswith('/expenses/') and http_method == 'DELETE':
            return handle_delete(event, user_id)
        else:
            return error_response("Route not found", status_code=404)

    except SpendingAnalyticsException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_list(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle list expenses."""
    expenses = expense_service.list_expenses(user_id)

    return success_response(data={
        'expenses': expenses,
        'count': len(expenses)
    })


def handle_create(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """
    Handle create expense.

    Args:
        event: Lambda event
        user_id: User ID

    Returns:
        API Gateway response
    """
    try:
        body = json.loads(event.get('body') or '{}')
        request = ExpenseCreate.model_validate(body)
    except json.JSONDecodeError:
        return validation_error_response("Request body must be valid JSON")
    except pydantic.ValidationError as e:
        return validation_error_response("Invalid expense", details={'errors': _error_messages(e)})

    expense = expense_service.create_expense(user_id, request.model_dump())

    return success_response(
        data=expense,
        message="Expense created successfully",
        status_code=201
    )


def handle_get(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle get expense details."""
    expense_id = _expense_id(event)
    if not expense_id:
        return validation_error_response("Expense ID is required")

    return success_response(data=expense_service.get_expense(user_id, expense_id))


def handle_update(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """
    Handle update expense.

    Args:
        event: Lambda event
        user_id: User ID

    Returns:
        API Gateway response
    """
    expense_id = _expense_id(event)
    if not expense_id:
        return validation_error_response("Expense ID is required")

    try:
        body = json.loads(event.get('body') or '{}')
        updates = ExpenseUpdate.model_validate(body).model_dump(exclude_unset=True)
    except json.JSONDecodeError:
        return validation_error_response("Request body must be valid JSON")
    except pydantic.ValidationError as e:
        return validation_error_response("Invalid expense update", details={'errors': _error_messages(e)})

    if not updates:
        return validation_error_response("No updates provided")

    updated_expense = expense_service.update_expense(user_id, expense_id, updates)

    logger.info(f"Expense updated successfully: {expense_id}")

    return success_response(
        data=updated_expense,
        message="Expense updated successfully"
    )


def handle_delete(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle soft-delete expense."""
    expense_id = _expense_id(event)
    if not expense_id:
        return validation_error_response("Expense ID is required")

    expense_service.delete_expense(user_id, expense_id)

    logger.info(f"Expense deleted successfully: {expense_id}")

    return success_response(message="Expense deleted successfully")


def _expense_id(event: Dict[str, Any]) -> str:
    path_params = event.get('pathParameters') or {}
    return path_params.get('id')


def _error_messages(error: pydantic.ValidationError) -> list:
    return [
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    ]
