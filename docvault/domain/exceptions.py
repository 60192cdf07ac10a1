"""Domain exceptions for docvault.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.

Document absence and insufficient access share one external shape
(DocumentNotFoundException / AccessDeniedException) so that responses never
reveal whether a document the caller cannot see exists.
"""

from typing import Any

from docvault.domain.enums import LinkDenialReason


class DocVaultException(Exception):
    """Base exception for all docvault application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serializable body for API error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DocVaultException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DocVaultException):
    """Raised when authentication fails (e.g. missing or invalid bearer token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(DocVaultException):
    """Raised when a requested resource (share, link, ...) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'share', 'link').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DocumentNotFoundException(DocVaultException):
    """Raised when a document is absent or soft-deleted."""

    def __init__(self, document_id: str) -> None:
        super().__init__(
            "Document not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": "document", "resource_id": document_id},
        )
        self.document_id = document_id


class AccessDeniedException(DocumentNotFoundException):
    """Raised when the requester lacks the required level on an existing document.

    Serializes exactly like DocumentNotFoundException. The requester and
    required level are kept as attributes for logging only.
    """

    def __init__(self, document_id: str, requester_id: str, required_level: str) -> None:
        super().__init__(document_id)
        self.requester_id = requester_id
        self.required_level = required_level


class LinkUnavailableException(DocVaultException):
    """Raised when an anonymous link cannot be used; the reason is disclosed."""

    _MESSAGES: dict[LinkDenialReason, str] = {
        LinkDenialReason.NOT_FOUND: "Share link not found",
        LinkDenialReason.REVOKED: "Share link has been revoked",
        LinkDenialReason.EXPIRED: "Share link has expired",
        LinkDenialReason.USE_LIMIT_REACHED: "Share link has reached its maximum number of uses",
    }

    def __init__(self, reason: LinkDenialReason) -> None:
        super().__init__(
            self._MESSAGES[reason],
            f"LINK_{reason.value.upper()}",
            {"reason": reason.value},
        )
        self.reason = reason


class DocumentVersionConflictException(DocVaultException):
    """Raised when the caller's base version no longer matches the stored version."""

    def __init__(
        self,
        document_id: str,
        expected_version: int | None = None,
        current_version: int | None = None,
    ) -> None:
        details: dict[str, Any] = {"document_id": document_id}
        if expected_version is not None:
            details["expected_version"] = expected_version
        if current_version is not None:
            details["current_version"] = current_version
        super().__init__(
            "Document was updated by another request; retry.",
            "DOCUMENT_VERSION_CONFLICT",
            details,
        )


class UpstreamUnavailableException(DocVaultException):
    """Raised when object storage (or another required collaborator) fails or is absent."""

    def __init__(self, service: str, message: str | None = None) -> None:
        super().__init__(
            message or f"{service} is unavailable",
            "UPSTREAM_UNAVAILABLE",
            {"service": service},
        )


class SqlNotConfiguredException(DocVaultException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class SearchStrategyTimeoutError(DocVaultException):
    """Raised by a search strategy whose statement exceeded the configured timeout.

    Internal: the search orchestrator treats it as an empty result.
    """

    def __init__(self, strategy: str) -> None:
        super().__init__(
            f"Search strategy '{strategy}' timed out",
            "SEARCH_STRATEGY_TIMEOUT",
            {"strategy": strategy},
        )
        self.strategy = strategy
