"""Custom exception classes for the application."""

from typing import Any


class IntelError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Identity Errors
class UnauthorizedError(IntelError):
    """No identity, or an invalid/expired/revoked one."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidCredentialsError(UnauthorizedError):
    """Invalid email or password."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InvalidTokenError(UnauthorizedError):
    """Invalid or expired token."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class ForbiddenError(IntelError):
    """Authenticated, but missing the required role."""

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message)


# Input Errors
class ValidationError(IntelError):
    """Input validation failed."""

    pass


# Data Errors
class BriefNotFoundError(IntelError):
    """Brief not found."""

    def __init__(self, brief_id: str) -> None:
        super().__init__(f"Brief not found: {brief_id}", {"brief_id": brief_id})


class ConflictError(IntelError):
    """Request conflicts with current state."""

    pass


class OperationInProgressError(ConflictError):
    """The same operation is already running."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"A {operation} request is already in progress",
            {"operation": operation},
        )


class PublishConflictError(ConflictError):
    """Another brief was promoted concurrently."""

    def __init__(self, brief_id: str) -> None:
        super().__init__(
            "Another brief was published at the same time; reload and try again",
            {"brief_id": brief_id},
        )


# External API Errors
class UpstreamError(IntelError):
    """Error calling or interpreting an external API."""

    def __init__(
        self,
        api_name: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.api_name = api_name
        super().__init__(f"{api_name} error: {message}", details)


class UpstreamUnavailableError(UpstreamError):
    """Network failure, timeout or 5xx from an external API."""

    def __init__(self, api_name: str, message: str = "Service unavailable") -> None:
        super().__init__(api_name, message)


class RateLimitedError(UpstreamError):
    """External API rejected the call with a rate limit."""

    def __init__(self, api_name: str) -> None:
        super().__init__(api_name, "Rate limit exceeded")


class QuotaExhaustedError(UpstreamError):
    """External API credits are depleted."""

    def __init__(self, api_name: str) -> None:
        super().__init__(api_name, "Quota exhausted")


class APIKeyMissingError(UpstreamError):
    """API key not configured."""

    def __init__(self, api_name: str) -> None:
        super().__init__(api_name, "API key not configured")


class MalformedResponseError(UpstreamError):
    """Model output is not a JSON object after fence stripping."""

    def __init__(self, raw_text: str, reason: str = "Response is not valid JSON") -> None:
        self.raw_text = raw_text
        super().__init__("BriefWriter", reason, {"raw_text": raw_text})


class IncompleteResponseError(UpstreamError):
    """Model output parsed but required fields are missing or blank."""

    def __init__(self, missing_fields: list[str]) -> None:
        self.missing_fields = missing_fields
        super().__init__(
            "BriefWriter",
            f"Response missing required fields: {', '.join(missing_fields)}",
            {"missing_fields": missing_fields},
        )
