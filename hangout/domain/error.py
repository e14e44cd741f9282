"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error.

    Raised before any write; nothing has been persisted.
    """

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class InvalidTransitionError(BusinessRuleViolationError):
    """Raised when an invite action is not legal from its current status."""

    def __init__(self, invite_id: str, status: str, action: str):
        self.invite_id = invite_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} invite {invite_id} while it is {status}")


class NotAuthorizedError(DomainError):
    """Raised when a user attempts an action their role does not allow."""

    def __init__(self, resource: str, resource_id: str, user_id: str, action: str):
        self.action = action
        super().__init__(
            f"User {user_id} is not authorized to {action} {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
