"""Domain exceptions for the SACCO back-office.

Business rule violations raised by application services. They carry no
HTTP knowledge; app.core.exception_handlers maps error_code to a status.

A failed permission check is returned as a value (PermissionDecision), and
a failed SMS send as a SendResult. AuthorizationException exists for the
API boundary, where a denial has to stop the request.
"""

from typing import Any


class SaccoException(Exception):
    """Base exception for all application errors.

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
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the error body used by the API exception handler."""
        return {
            "success": False,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(SaccoException):
    """Raised when input validation fails (e.g. unknown target type)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(SaccoException):
    """Raised when authentication fails (bad credentials, inactive account)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(SaccoException):
    """Raised at the API boundary when a permission check was denied.

    Args:
        required: Permission names the caller needed.
        missing: For all-of checks, the names the caller lacks.
    """

    def __init__(
        self,
        required: list[str] | None = None,
        missing: list[str] | None = None,
        message: str | None = None,
    ) -> None:
        required = list(required or [])
        if message is None:
            if missing:
                message = f"Missing permissions: {', '.join(missing)}"
            elif len(required) == 1:
                message = f"Insufficient permissions. Required: {required[0]}"
            elif required:
                message = (
                    f"Insufficient permissions. Required one of: {', '.join(required)}"
                )
            else:
                message = "Permission denied"
        details: dict[str, Any] = {"required": required}
        if missing:
            details["missing"] = list(missing)
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(SaccoException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidStateException(SaccoException):
    """Raised when an operation targets an entity in the wrong lifecycle state."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        current_state: str,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message
            or f"{resource_type} {resource_id} cannot be changed in status '{current_state}'",
            "INVALID_STATE",
            {
                "resource_type": resource_type,
                "resource_id": resource_id,
                "current_state": current_state,
            },
        )


class NoRecipientsException(SaccoException):
    """Raised when a campaign audience resolves to zero recipients."""

    def __init__(self, campaign_id: str, target_type: str) -> None:
        super().__init__(
            "No valid recipients found for this campaign",
            "NO_RECIPIENTS",
            {"campaign_id": campaign_id, "target_type": target_type},
        )


class DuplicateAssignmentException(SaccoException):
    """Raised when an assignment (user-role, role-permission) already exists."""

    def __init__(
        self,
        message: str,
        *,
        assignment_type: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        details: dict[str, Any] = {"assignment_type": assignment_type}
        if details_extra:
            details.update(details_extra)
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


class ResourceInUseException(SaccoException):
    """Raised when deleting something that is still referenced or protected."""

    def __init__(self, resource_type: str, resource_id: str, reason: str) -> None:
        super().__init__(
            reason,
            "RESOURCE_IN_USE",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DispatchAlreadyRunningException(SaccoException):
    """Raised when a dispatch loop is already registered for the campaign."""

    def __init__(self, campaign_id: str) -> None:
        super().__init__(
            f"Campaign {campaign_id} is already being sent",
            "INVALID_STATE",
            {"campaign_id": campaign_id},
        )
