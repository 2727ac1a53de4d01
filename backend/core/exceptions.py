"""Custom exceptions for the LocaLink backend."""


class LocaLinkException(Exception):
    """Base exception for the LocaLink backend."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code.

        Args:
            message: Exception message
            status_code: HTTP status code
        """
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class UnauthenticatedError(LocaLinkException):
    """No actor identity present where one is required."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message, 401)


class UnauthorizedError(LocaLinkException):
    """Inbound webhook write lacks authorization evidence."""

    def __init__(self, message: str = "Missing authorization header"):
        super().__init__(message, 401)


class MalformedPayloadError(LocaLinkException):
    """Inbound webhook body is not a parseable JSON object."""

    def __init__(self, message: str = "Invalid JSON body"):
        super().__init__(message, 400)


class MethodNotAllowedError(LocaLinkException):
    """Unsupported HTTP verb on a relay entry point."""

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message, 405)


class PersistenceError(LocaLinkException):
    """Durable read or write failed.

    Attributes:
        details: Message of the underlying storage error, kept for diagnostics
    """

    def __init__(self, message: str = "Persistence failure", details: str = ""):
        self.details = details
        super().__init__(message, 500)


class NotificationDeliveryFailure(LocaLinkException):
    """Outbound automation notification failed on both attempts.

    Only ever raised inside the background dispatcher, which logs it.
    """

    def __init__(self, message: str = "Notification delivery failed"):
        super().__init__(message, 502)


class UpstreamError(LocaLinkException):
    """A synchronous call to the automation platform failed."""

    def __init__(self, message: str = "Automation platform unavailable"):
        super().__init__(message, 502)
