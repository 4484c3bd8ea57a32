"""Custom exceptions for the spending analytics service."""


class SpendingAnalyticsException(Exception):
    """Base exception for all spending analytics errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(SpendingAnalyticsException):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class InvalidRangeError(ValidationError):
    """Raised when startDate/endDate cannot be parsed into a date range."""

    def __init__(self, message: str = "Invalid date range provided."):
        super().__init__(message)


class NotFoundError(SpendingAnalyticsException):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class UpstreamStoreError(SpendingAnalyticsException):
    """Raised when the expense store cannot be read or written."""

    def __init__(self, message: str = "Expense store operation failed"):
        super().__init__(message, status_code=500)
