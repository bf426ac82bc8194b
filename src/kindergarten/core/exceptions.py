class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a token, child or active session cannot be resolved."""

    code = "NOT_FOUND"


class InvalidStateError(DomainError):
    """Raised when a child's status has no outgoing transition."""

    code = "INVALID_STATE"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"


class TransitionConflict(DomainError):
    """Raised when the child row changed between read and compare-and-swap."""

    code = "CONFLICT"


class NotificationDeliveryFailure(DomainError):
    """Raised by email/SMS senders. Callers log it and carry on."""

    code = "DELIVERY_FAILED"
