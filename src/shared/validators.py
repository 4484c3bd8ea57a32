"""Validation utilities for the spending analytics service."""

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 date or date-time into a naive UTC datetime.

    Accepts ``YYYY-MM-DD``, ``YYYY-MM-DDTHH:MM[:SS[.ffffff]]`` and either
    form followed by ``Z`` or a ``+HH:MM`` offset. Offset-aware values are
    converted to UTC before the offset is dropped.

    Args:
        value: String or datetime to parse

    Returns:
        Naive datetime in UTC

    Raises:
        ValueError: If the value is not a valid date
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)

    return parsed


def format_timestamp(value: datetime) -> str:
    """
    Format a naive UTC datetime the way the expense store keeps it.

    Always YYYY-MM-DDTHH:MM:SS with a four-digit year, so stored values sort
    lexicographically in chronological order.
    """
    return value.isoformat(timespec='seconds')


def validate_amount(amount: Any) -> Decimal:
    """
    Validate monetary amount.

    Args:
        amount: Amount to validate

    Returns:
        Validated amount as Decimal

    Raises:
        ValidationError: If amount is invalid
    """
    if amount is None:
        raise ValidationError("Amount is required")

    if isinstance(amount, bool):
        raise ValidationError("Invalid amount format")

    try:
        decimal_amount = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Invalid amount format")

    if not decimal_amount.is_finite():
        raise ValidationError("Invalid amount format")

    if decimal_amount < 0:
        raise ValidationError("Amount cannot be negative")

    if decimal_amount > Decimal('999999999.99'):
        raise ValidationError("Amount is too large")

    # Ensure at most 2 decimal places
    if decimal_amount.as_tuple().exponent < -2:
        raise ValidationError("Amount can have at most 2 decimal places")

    return decimal_amount


def validate_date(date_str: Any) -> str:
    """
    Validate an expense date and normalize it to the stored format.

    Args:
        date_str: ISO-8601 date or date-time

    Returns:
        Timestamp formatted as YYYY-MM-DDTHH:MM:SS

    Raises:
        ValidationError: If date is invalid
    """
    if not date_str:
        raise ValidationError("Date is required")

    try:
        return format_timestamp(parse_timestamp(date_str))
    except ValueError:
        raise ValidationError("Invalid date format. Use ISO-8601, e.g. 2024-03-13 or 2024-03-13T10:30:00Z")


def validate_label(value: Any, field_name: str, max_length: int = 100) -> str:
    """
    Validate a free-text label such as a category.

    Labels are not drawn from a fixed list; only emptiness and length are
    checked. Casing and inner whitespace are preserved.

    Raises:
        ValidationError: If the label is missing or too long
    """
    if value is None:
        raise ValidationError(f"{field_name} is required")

    label = sanitize_string(value, max_length=max_length)
    if not label:
        raise ValidationError(f"{field_name} is required")

    return label


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> None:
    """
    Validate that required fields are present in data.

    Args:
        data: Data dictionary to validate
        required_fields: List of required field names

    Raises:
        ValidationError: If any required field is missing
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None]

    if missing_fields:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing_fields)}"
        )


def sanitize_string(value: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize string input.

    Args:
        value: String to sanitize
        max_length: Optional maximum length

    Returns:
        Sanitized string

    Raises:
        ValidationError: If string is invalid
    """
    if not isinstance(value, str):
        raise ValidationError("Value must be a string")

    # Remove leading/trailing whitespace
    value = value.strip()

    if max_length and len(value) > max_length:
        raise ValidationError(f"Value exceeds maximum length of {max_length}")

    return value
