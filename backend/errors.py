from fastapi import status


class OrderIntakeError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(OrderIntakeError):
    """Submission is missing an image source or a required field."""

    status_code = status.HTTP_400_BAD_REQUEST


class PersistenceError(OrderIntakeError):
    """The order could not be written to the document store."""

    def __init__(self, message: str = "An error occurred. Please try again.") -> None:
        super().__init__(message)


class NotificationError(OrderIntakeError):
    """Chat notification failed. Logged by callers, never returned to clients."""
