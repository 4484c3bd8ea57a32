"""Caller identity as provided by the API Gateway Cognito authorizer."""

from typing import Any, Dict, Optional


def get_user_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract user ID from Cognito authorizer claims.

    Args:
        event: Lambda event

    Returns:
        User ID (sub claim), or None when the request carries no claims
    """
    request_context = event.get('requestContext') or {}
    authorizer = request_context.get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    return claims.get('sub')
